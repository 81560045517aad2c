"""Normalization of dependency tokens printed by `gradle dependencies`.

A token is the text after the tree art of one report line, e.g.

    org.jetbrains.kotlin:kotlin-stdlib-jdk8:1.6.21
    org.jetbrains.kotlin:kotlin-stdlib:1.6.21 -> 1.7.10
    org.jetbrains.kotlin:kotlin-stdlib:1.6.21 -> 1.7.10 (*)
    androidx.profileinstaller:profileinstaller:1.3.0 (*)
    androidx.compose.ui:ui-tooling -> 1.3.3
    androidx.compose.material:material -> 1.3.1 (*)

and is reduced to group:artifact:version, where version is the one Gradle
actually resolved.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .errors import MalformedCoordinateError

logger = logging.getLogger(__name__)

ARROW = "->"

# (*) subtree listed previously, (c) dependency constraint, (n) not resolved
MARKERS = frozenset({"(*)", "(c)", "(n)"})


class TokenShape(Enum):
    """Surface syntax a dependency token was written in."""

    PLAIN = "plain"                            # g:a:1.0
    OMITTED = "omitted"                        # g:a:1.0 (*)
    OVERRIDDEN = "overridden"                  # g:a:1.0 -> 2.0
    OVERRIDDEN_OMITTED = "overridden-omitted"  # g:a:1.0 -> 2.0 (*)
    MANAGED = "managed"                        # g:a -> 2.0, version from a BOM or platform


@dataclass(frozen=True)
class DependencyToken:
    """A classified dependency token."""

    group: str
    artifact: str
    version: str
    shape: TokenShape
    declared_version: Optional[str] = None
    marker: Optional[str] = None
    trailing: Optional[str] = None  # unrecognized text after the version, e.g. FAILED

    @property
    def canonical(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


def _malformed(token: str, reason: str) -> MalformedCoordinateError:
    return MalformedCoordinateError(f"unexpected format ({reason}): {token}", token=token)


def _split_trailing(rest: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """Separate a known marker from any other text following the version."""
    if len(rest) == 1 and rest[0] in MARKERS:
        return rest[0], None
    return None, ' '.join(rest) or None


def _parse_versioned(token: str, group: str, artifact: str, expression: str) -> DependencyToken:
    # |0     |1 |2     |3  |
    # `1.6.21 -> 1.7.10 (*)`
    parts = expression.split(' ')

    if len(parts) <= 2:
        marker, trailing = _split_trailing(parts[1:])
        shape = TokenShape.OMITTED if marker else TokenShape.PLAIN
        return DependencyToken(group, artifact, parts[0], shape, marker=marker, trailing=trailing)

    if len(parts) <= 4:
        if parts[1] != ARROW:
            logger.debug(f"Expected '{ARROW}' but found '{parts[1]}' in {token}")
        marker, trailing = _split_trailing(parts[3:])
        shape = TokenShape.OVERRIDDEN_OMITTED if marker else TokenShape.OVERRIDDEN
        return DependencyToken(group, artifact, parts[2], shape,
                               declared_version=parts[0], marker=marker, trailing=trailing)

    raise _malformed(token, f"{len(parts)} version tokens")


def _parse_managed(token: str, group: str, expression: str) -> DependencyToken:
    # |0       |1 |2    |3  |
    # `material -> 1.3.1 (*)`
    parts = expression.split(' ')
    if len(parts) < 3:
        raise _malformed(token, "missing version")
    if parts[1] != ARROW:
        logger.debug(f"Expected '{ARROW}' but found '{parts[1]}' in {token}")
    marker, trailing = _split_trailing(parts[3:])
    return DependencyToken(group, parts[0], parts[2], TokenShape.MANAGED, marker=marker, trailing=trailing)


def parse_token(token: str) -> DependencyToken:
    """
    Classify a dependency token.

    Args:
        token: Text of a report line after its tree art, e.g. ``g:a:1.0 -> 2.0 (*)``

    Returns:
        DependencyToken holding the resolved version and the shape it was written in

    Raises:
        MalformedCoordinateError: If the token does not have 2 or 3 segments, has
            more than 4 version tokens, or lacks a version
    """
    token = token.strip()
    segments = token.split(':')

    if len(segments) == 3:
        token_info = _parse_versioned(token, segments[0], segments[1], segments[2])
    elif len(segments) == 2:
        token_info = _parse_managed(token, segments[0], segments[1])
    else:
        raise _malformed(token, f"{len(segments)} segments")

    if not (token_info.group and token_info.artifact and token_info.version):
        raise _malformed(token, "empty group, artifact or version")
    if token_info.trailing:
        logger.info(f"Ignoring '{token_info.trailing}' after the version of {token}")
    return token_info


def normalize_coordinate(token: str) -> str:
    """Reduce a dependency token to group:artifact:version."""
    return parse_token(token).canonical


def segment_count(line: str) -> int:
    """Number of colon-separated segments in a line."""
    return len(line.split(':'))
