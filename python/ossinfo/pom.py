"""Deserialization of maven-metadata.xml and POM documents."""

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

from .errors import DescriptorParseError
from .licenses import classify_licenses
from .models import MavenMetadata, Pom

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the namespace from an element tag."""
    return tag.split('}')[-1] if '}' in tag else tag


def _find_child(parent: ET.Element, tag_name: str) -> Optional[ET.Element]:
    """Find a direct child by local name, whether or not the document is namespaced."""
    for child in parent:
        if _local_name(child.tag) == tag_name:
            return child
    return None


def get_element_text(parent: ET.Element, tag_name: str) -> Optional[str]:
    """Get text content of a direct child element."""
    elem = _find_child(parent, tag_name)
    if elem is not None and elem.text:
        return elem.text.strip() or None
    return None


def _parse_root(xml: str, document: str) -> ET.Element:
    try:
        return ET.fromstring(xml)
    except ET.ParseError as e:
        raise DescriptorParseError(f"failed to parse {document}: {e}") from e


def _require(root: ET.Element, tag_name: str, document: str) -> str:
    value = get_element_text(root, tag_name)
    if value is None:
        raise DescriptorParseError(f"missing <{tag_name}> in {document}")
    return value


def parse_maven_metadata(xml: str) -> MavenMetadata:
    """
    Parse an artifact-level maven-metadata.xml.

    See https://maven.apache.org/ref/3.9.4/maven-repository-metadata/

    Raises:
        DescriptorParseError: If the document is not XML or lacks groupId/artifactId
    """
    root = _parse_root(xml, 'maven-metadata.xml')

    latest_version = None
    release_version = None
    versioning = _find_child(root, 'versioning')
    if versioning is not None:
        latest_version = get_element_text(versioning, 'latest')
        release_version = get_element_text(versioning, 'release')

    return MavenMetadata(
        group_id=_require(root, 'groupId', 'maven-metadata.xml'),
        artifact_id=_require(root, 'artifactId', 'maven-metadata.xml'),
        version=get_element_text(root, 'version'),
        latest_version=latest_version,
        release_version=release_version,
    )


def _parse_license_names(root: ET.Element) -> List[str]:
    licenses_elem = _find_child(root, 'licenses')
    if licenses_elem is None:
        return []

    names = []
    for license_elem in licenses_elem:
        if _local_name(license_elem.tag) != 'license':
            continue
        name = get_element_text(license_elem, 'name')
        if name:
            names.append(name)
        else:
            logger.debug("Skipping <license> without <name>")
    return names


def parse_pom(xml: str) -> Pom:
    """
    Parse the descriptive parts of a POM.

    Only direct children of <project> are read, so values inside <parent>
    never leak into the result.
    See https://maven.apache.org/pom.html

    Raises:
        DescriptorParseError: If the document is not XML or lacks artifactId
    """
    root = _parse_root(xml, 'pom.xml')

    return Pom(
        group_id=get_element_text(root, 'groupId'),
        artifact_id=_require(root, 'artifactId', 'pom.xml'),
        version=get_element_text(root, 'version'),
        packaging=get_element_text(root, 'packaging'),
        name=get_element_text(root, 'name'),
        description=get_element_text(root, 'description'),
        licenses=classify_licenses(_parse_license_names(root)),
    )
