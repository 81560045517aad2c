"""Core data models for ossinfo."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import MalformedCoordinateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    """A Maven coordinate in group:artifact[:version] form."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> 'Coordinate':
        """
        Parse a group:artifact[:version] string.

        Segments after the version are ignored.

        Raises:
            MalformedCoordinateError: If the group or artifact is missing
        """
        segments = value.split(':')
        group_id = segments[0].strip()
        if not group_id:
            raise MalformedCoordinateError(f"missing group id: {value}", token=value)

        artifact_id = segments[1].strip() if len(segments) > 1 else ''
        if not artifact_id:
            raise MalformedCoordinateError(f"missing artifact id: {value}", token=value)

        version = segments[2].strip() if len(segments) > 2 else None
        if len(segments) > 3:
            logger.info(f"Ignoring extra segments of {value}")

        return cls(group_id=group_id, artifact_id=artifact_id, version=version or None)

    @property
    def key(self) -> str:
        """Return the version-less group:artifact key."""
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def repository_path(self) -> str:
        """Return the artifact directory in the Maven repository layout."""
        return f"{self.group_id.replace('.', '/')}/{self.artifact_id}"

    def __str__(self) -> str:
        if self.version:
            return f"{self.key}:{self.version}"
        return self.key


@dataclass
class MavenMetadata:
    """Contents of an artifact's maven-metadata.xml."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    latest_version: Optional[str] = None
    release_version: Optional[str] = None

    @property
    def preferred_version(self) -> Optional[str]:
        """Version whose POM describes the artifact: release, then latest, then version."""
        return self.release_version or self.latest_version or self.version


@dataclass
class Pom:
    """The parts of a POM that ossinfo reports on."""

    artifact_id: str
    group_id: Optional[str] = None  # Inherited from <parent> when absent
    version: Optional[str] = None
    packaging: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    licenses: List[str] = field(default_factory=list)  # SPDX ids where known, raw names otherwise


@dataclass
class ArtifactInfo:
    """Information collected for one input coordinate."""

    coordinate: str
    version: Optional[str] = None
    latest_version: Optional[str] = None
    release_version: Optional[str] = None
    packaging: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    licenses: List[str] = field(default_factory=list)

    @classmethod
    def from_descriptors(cls, coordinate: str, metadata: MavenMetadata, pom: Pom) -> 'ArtifactInfo':
        """Combine the repository metadata and the POM of one artifact."""
        return cls(
            coordinate=coordinate,
            version=pom.version,
            latest_version=metadata.latest_version,
            release_version=metadata.release_version,
            packaging=pom.packaging,
            name=pom.name,
            description=pom.description,
            licenses=list(pom.licenses),
        )

    @property
    def input_version(self) -> str:
        """Version given in the input coordinate, or an empty string."""
        segments = self.coordinate.split(':')
        return segments[2] if len(segments) > 2 else ''
