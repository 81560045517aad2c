"""Parsers for `gradle dependencies` reports."""

import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union
from urllib.parse import urlparse

import requests

from .coordinates import normalize_coordinate, segment_count
from .errors import (
    MalformedCoordinateError,
    MissingConfigurationError,
    ReportReadError,
    UnexpectedIndentError,
)

logger = logging.getLogger(__name__)

# Each nesting level is one `|` or space column plus a 4 character connector
INDENT_WIDTH = 5

TREE_ART_PATTERN = re.compile(r'[+\\]--- ')
DEPENDENCY_PATTERN = re.compile(r'[+\\]--- (.*)$')
PROJECT_MARKER = '--- project '

MISSING_CONFIGURATION_MESSAGE = (
    "Please specify `--configuration` option. "
    "e.g: `--configuration releaseRuntimeClasspath`"
)

Report = Union[str, Iterable[str]]


def _is_url(path: str) -> bool:
    """Check if a path is a URL."""
    return urlparse(path).scheme in ('http', 'https')


def _iter_lines(source: Report) -> Iterator[str]:
    """
    Yield the lines of a report without their line endings.

    Args:
        source: Whole report text, or any iterable of lines (open file, stdin)

    Raises:
        ReportReadError: If the line source fails while reading
    """
    if isinstance(source, str):
        yield from source.splitlines()
        return

    lines = iter(source)
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Reading report failed: {e!r}")
            raise ReportReadError(f"failed to read lines: {e}") from e
        yield line.rstrip('\r\n')


def calculate_level(line: str) -> Optional[int]:
    """
    Compute the nesting depth of a report line from its tree art.

    Returns:
        Depth (0 for dependencies declared directly in the configuration),
        or None when the line carries no tree art

    Raises:
        UnexpectedIndentError: If the tree art is not on an indent boundary
    """
    match = TREE_ART_PATTERN.search(line)
    if match is None:
        return None

    indent = match.start()
    if indent % INDENT_WIDTH != 0:
        raise UnexpectedIndentError(f"unexpected indent: {indent}")
    return indent // INDENT_WIDTH


def _dependency_token(line: str) -> str:
    match = DEPENDENCY_PATTERN.search(line)
    if match is None:
        raise MalformedCoordinateError(f"unexpected format: {line}", token=line)
    return match.group(1)


@dataclass
class _TreeState:
    """Per-call state of the tree walk."""

    found_start: bool = False
    end: bool = False
    current_level: int = 0


class DependencyReportParser:
    """Parser for the two report formats ossinfo accepts."""

    @staticmethod
    def parse_dependencies_string(report: Report) -> List[str]:
        """
        Extract the dependencies of one configuration from a `gradle dependencies` report.

        Only dependencies declared directly in the configuration are returned,
        plus those declared directly in any project the configuration pulls in:

            +--- g:a:1.0               <- kept
            |    \\--- g2:b:2.0         <- transitive, dropped
            \\--- project :lib
                 \\--- g3:c:3.0         <- declared by :lib, kept

        Banner and log lines around the tree are ignored.
        See https://docs.gradle.org/current/userguide/viewing_debugging_dependencies.html

        Args:
            report: Report text, or an iterable of its lines

        Returns:
            Sorted, de-duplicated group:artifact:version strings

        Raises:
            UnexpectedIndentError: Tree art off an indent boundary, or a nested line before the root
            MissingConfigurationError: The report holds the trees of several configurations
            MalformedCoordinateError: A dependency token of unknown shape
            ReportReadError: The line source failed
        """
        dependencies = set()
        state = _TreeState()

        for line in _iter_lines(report):
            line_level = calculate_level(line)

            if not state.found_start or state.end:
                if line_level == 0:
                    if state.end:
                        raise MissingConfigurationError(MISSING_CONFIGURATION_MESSAGE)
                    state.found_start = True
                elif line_level is not None:
                    raise UnexpectedIndentError(f"unexpected indent before the first dependency: {line}")
                else:
                    continue

            if line_level is None:
                state.end = True
                continue

            if PROJECT_MARKER in line:
                # \--- project :lib
                #      \--- g:a:1.0
                state.current_level = line_level + 1
                logger.debug(f"Entering {line.strip()} at level {line_level}")
                continue

            if state.current_level < line_level:
                logger.debug(f"Skipping transitive dependency: {line.strip()}")
                continue

            # Returning from a project or a deeper subtree:
            # +--- project :lib
            # |    \--- g:a:1.0
            # \--- g2:b:2.0
            state.current_level = line_level

            coordinate = normalize_coordinate(_dependency_token(line))
            logger.debug(f"Found dependency {coordinate} at level {line_level}")
            dependencies.add(coordinate)

        result = sorted(dependencies)
        logger.info(f"Parsed {len(result)} dependencies from dependency report")
        return result

    @staticmethod
    def parse_prettied_dependencies(lines: Report) -> List[str]:
        """
        Parse a pre-flattened list with one dependency per line.

        Example:
            androidx.activity:activity:1.2.4 -> 1.4.0 (*)
            androidx.annotation:annotation:1.3.0
            androidx.appcompat:appcompat

        Lines with three segments are normalized; anything else (usually a
        coordinate without a version) is kept as written.

        Returns:
            Sorted, de-duplicated dependency strings

        Raises:
            MalformedCoordinateError: A three-segment line of unknown shape
            ReportReadError: The line source failed
        """
        dependencies = set()

        for line in _iter_lines(lines):
            line = line.strip()
            if not line:
                continue

            if segment_count(line) == 3:
                line = normalize_coordinate(line)
            dependencies.add(line)

        result = sorted(dependencies)
        logger.info(f"Parsed {len(result)} dependencies from flat list")
        return result

    @staticmethod
    def parse_input(path: str, skip_pretty: bool = False) -> List[str]:
        """
        Read a report from stdin (`-`), a URL or a file and parse it.

        Args:
            path: `-`, an http(s) URL or a file path
            skip_pretty: Input is a pre-flattened list rather than a tree report

        Raises:
            ReportReadError: If the input cannot be read
            ReportError: If the input cannot be parsed
        """
        parse = (DependencyReportParser.parse_prettied_dependencies if skip_pretty
                 else DependencyReportParser.parse_dependencies_string)

        if path == '-':
            logger.info("Reading dependency report from stdin")
            return parse(sys.stdin)

        if _is_url(path):
            logger.info(f"Fetching dependency report from URL: {path}")
            try:
                response = requests.get(path, timeout=30)
                response.raise_for_status()
            except requests.RequestException as e:
                raise ReportReadError(f"failed to fetch {path}: {e}") from e
            return parse(response.text)

        logger.info(f"Reading dependency report from file: {path}")
        try:
            with open(Path(path), 'r', encoding='utf-8') as f:
                return parse(f)
        except OSError as e:
            raise ReportReadError(f"failed to open {path}: {e}") from e
