"""Client for retrieving artifact information from Maven repositories."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable

import requests

from . import __version__
from .errors import ArtifactFetchError, OssInfoError
from .models import ArtifactInfo, Coordinate
from .pom import parse_maven_metadata, parse_pom

logger = logging.getLogger(__name__)

# https://maven.google.com/web/index.html
GOOGLE_MAVEN_URL = "https://dl.google.com/android/maven2"
# https://central.sonatype.com/
MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2"

GOOGLE_GROUP_PREFIXES = ("androidx", "com.google.android")

DEFAULT_MAX_WORKERS = 8


@dataclass
class RetrievalResult:
    """Outcome of a batch lookup."""

    infos: Dict[str, ArtifactInfo] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)  # coordinate -> error message

    @property
    def has_errors(self) -> bool:
        return bool(self.failures)


class MavenRepositoryClient:
    """Client for fetching maven-metadata.xml and POM files."""

    def __init__(self, google_url: str = GOOGLE_MAVEN_URL, central_url: str = MAVEN_CENTRAL_URL,
                 timeout: float = 30):
        """
        Initialize the client.

        Args:
            google_url: Root of the Google Maven repository
            central_url: Root of the Maven Central repository
            timeout: Per-request timeout in seconds
        """
        self.google_url = google_url.rstrip('/')
        self.central_url = central_url.rstrip('/')
        self.timeout = timeout
        # requests.Session is not thread-safe; each worker thread gets its own
        self._local = threading.local()
        self._sessions = []
        self._sessions_lock = threading.Lock()
        self._local.session = self._new_session()

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "Accept": "application/xml,text/xml",
            "User-Agent": f"ossinfo/{__version__}"
        })
        with self._sessions_lock:
            self._sessions.append(session)
        return session

    @property
    def session(self) -> requests.Session:
        """Session owned by the calling thread."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._local.session = self._new_session()
        return session

    def repository_for(self, coordinate: Coordinate) -> str:
        """Pick the repository hosting a coordinate's group."""
        if coordinate.group_id.startswith(GOOGLE_GROUP_PREFIXES):
            return self.google_url
        return self.central_url

    def _get_text(self, url: str, document: str) -> str:
        logger.debug(f"  URL: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ArtifactFetchError(f"failed to request {document}. url: {url}: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ArtifactFetchError(
                f"server returned an error for {document}. url: {url}: HTTP {response.status_code}"
            ) from e
        return response.text

    def retrieve(self, dependency: str) -> ArtifactInfo:
        """
        Retrieve information about the artifact a coordinate names.

        The POM of the artifact's release version is used (falling back to
        the latest version, then the metadata's version), not the POM of the
        version given in the coordinate.
        See https://maven.apache.org/repository/layout.html

        Args:
            dependency: Coordinate in group:artifact[:version] form

        Returns:
            ArtifactInfo for the artifact

        Raises:
            MalformedCoordinateError: If the coordinate lacks a group or artifact
            ArtifactFetchError: If a document cannot be fetched or parsed
        """
        coordinate = Coordinate.parse(dependency)
        if coordinate.version:
            logger.info(f"Ignoring version of {dependency} for lookup")

        artifact_root = f"{self.repository_for(coordinate)}/{coordinate.repository_path}"
        logger.debug(f"Fetching artifact information for {dependency}")

        metadata_url = f"{artifact_root}/maven-metadata.xml"
        try:
            metadata = parse_maven_metadata(self._get_text(metadata_url, "maven-metadata.xml"))
        except ArtifactFetchError:
            raise
        except OssInfoError as e:
            raise ArtifactFetchError(f"failed to parse maven-metadata.xml. url: {metadata_url}: {e}") from e
        logger.debug(f"  metadata: {metadata}")

        version = metadata.preferred_version
        if not version:
            raise ArtifactFetchError(f"missing release, latest and version: {metadata_url}")
        if not (metadata.release_version or metadata.latest_version):
            logger.info(f"Using <version> of {metadata_url}")

        pom_url = f"{artifact_root}/{version}/{metadata.artifact_id}-{version}.pom"
        try:
            pom = parse_pom(self._get_text(pom_url, "pom.xml"))
        except ArtifactFetchError:
            raise
        except OssInfoError as e:
            raise ArtifactFetchError(f"failed to parse pom.xml. url: {pom_url}: {e}") from e

        return ArtifactInfo.from_descriptors(dependency, metadata, pom)

    def retrieve_all(self, dependencies: Iterable[str], max_workers: int = DEFAULT_MAX_WORKERS) -> RetrievalResult:
        """
        Retrieve information for many coordinates with a bounded worker pool.

        A failed lookup is logged and recorded in the result; it does not stop
        the remaining lookups.
        """
        dependencies = list(dependencies)
        result = RetrievalResult()
        if not dependencies:
            return result

        workers = max(1, min(max_workers, len(dependencies)))
        logger.info(f"Retrieving {len(dependencies)} artifacts with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_name = {
                executor.submit(self.retrieve, name): name
                for name in dependencies
            }
            for future in as_completed(future_to_name):
                name = future_to_name[future]
                try:
                    result.infos[name] = future.result()
                except OssInfoError as e:
                    logger.warning(f"Failed to request artifact info for {name}: {e}")
                    result.failures[name] = str(e)

        logger.info(f"Retrieved {len(result.infos)} artifacts, {len(result.failures)} failed")
        return result

    def close(self):
        """Close the sessions of all threads and clean up resources."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
