"""Output formatters for various formats."""

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Dict, List, Sequence
from uuid import uuid4

from cyclonedx.model import ExternalReference, ExternalReferenceType, XsUri
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType
from cyclonedx.model.license import DisjunctiveLicense
from cyclonedx.output.json import JsonV1Dot6
from packageurl import PackageURL

from .errors import MalformedCoordinateError
from .licenses import Spdx
from .models import ArtifactInfo, Coordinate

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Dependency",
    "Version (Input)",
    "Version (Latest)",
    "Packaging",
    "Name",
    "Description",
    "Licenses",
]

SPDX_IDS = frozenset(spdx.value for spdx in Spdx)


class OutputFormatter:
    """Formatter for various output formats."""

    @staticmethod
    def format_as_list(dependencies: Sequence[str]) -> str:
        """Format dependencies as a flat list (one per line)."""
        if not dependencies:
            return ''
        return '\n'.join(dependencies) + '\n'

    @staticmethod
    def format_as_csv(dependencies: Sequence[str], infos: Dict[str, ArtifactInfo]) -> str:
        """
        Format artifact information as CSV, one row per dependency in input order.

        Dependencies without information (failed lookups) are skipped.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(CSV_HEADER)

        for dependency in dependencies:
            info = infos.get(dependency)
            if info is None:
                logger.info(f"Skipping {dependency}: no artifact information")
                continue

            coordinate = Coordinate.parse(dependency)
            writer.writerow([
                coordinate.key,
                info.input_version,
                info.version or '',
                info.packaging or '',
                info.name or '',
                info.description or '',
                '/'.join(info.licenses),
            ])

        return buffer.getvalue()

    @staticmethod
    def format_as_sbom(dependencies: Sequence[str], infos: Dict[str, ArtifactInfo]) -> str:
        """Generate a CycloneDX SBOM in JSON format."""
        from . import __version__

        bom = Bom()
        bom.serial_number = uuid4()

        tool_component = Component(
            name="ossinfo",
            version=__version__,
            type=ComponentType.APPLICATION,
            bom_ref=f"ossinfo@{__version__}",
            external_references=[
                ExternalReference(
                    type=ExternalReferenceType.DISTRIBUTION,
                    url=XsUri("https://pypi.org/project/ossinfo/")
                )
            ]
        )
        bom.metadata.tools.components.add(tool_component)
        bom.metadata.timestamp = datetime.now(timezone.utc).replace(microsecond=0)

        for dependency in dependencies:
            try:
                component = OutputFormatter._dependency_to_component(dependency, infos.get(dependency))
            except MalformedCoordinateError as e:
                logger.warning(f"Skipping {dependency} in SBOM: {e}")
                continue
            bom.components.add(component)

        outputter = JsonV1Dot6(bom)
        return outputter.output_as_string(indent=2) + "\n"

    @staticmethod
    def _to_licenses(licenses: List[str]) -> List[DisjunctiveLicense]:
        """Map classified license strings to CycloneDX licenses."""
        return [
            DisjunctiveLicense(id=value) if value in SPDX_IDS else DisjunctiveLicense(name=value)
            for value in licenses
        ]

    @staticmethod
    def _dependency_to_component(dependency: str, info: ArtifactInfo = None) -> Component:
        """Convert a dependency (and its information, when known) to a CycloneDX Component."""
        coordinate = Coordinate.parse(dependency)
        purl_str = OutputFormatter._build_purl(coordinate)

        component = Component(
            name=coordinate.artifact_id,
            group=coordinate.group_id,
            version=coordinate.version,
            type=ComponentType.LIBRARY,
            purl=PackageURL.from_string(purl_str),
            bom_ref=purl_str,
        )
        if info is not None:
            component.description = info.description
            component.licenses = OutputFormatter._to_licenses(info.licenses)

        return component

    @staticmethod
    def _build_purl(coordinate: Coordinate) -> str:
        """Build a Package URL (purl) string for a coordinate."""
        purl = PackageURL(
            type='maven',
            namespace=coordinate.group_id,
            name=coordinate.artifact_id,
            version=coordinate.version,
        )
        return purl.to_string()
