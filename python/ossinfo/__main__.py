"""Main CLI entry point for ossinfo."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .api_client import DEFAULT_MAX_WORKERS, GOOGLE_MAVEN_URL, MAVEN_CENTRAL_URL, MavenRepositoryClient
from .errors import ReportError
from .formatters import OutputFormatter
from .parsers import DependencyReportParser

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_level: Optional[str] = None):
    """Configure logging based on verbosity flags."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s',
        stream=sys.stderr
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='ossinfo',
        description='Collect OSS information from server for the dependencies printed by '
                    '`gradle dependencies --configuration <name>`'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--input', default='-',
                        help='Dependency report file or URL (default: stdin, use - for stdin)')
    parser.add_argument('--format', dest='output_format', default='csv',
                        choices=['csv', 'list', 'sbom'],
                        help='Output format (csv, list, sbom). Default: csv')
    parser.add_argument('--skip-pretty', action='store_true',
                        help='Parse input as manually formatted Gradle output (one dependency per line)')
    parser.add_argument('--no-fetch', action='store_true',
                        help='Only print the parsed dependencies, without retrieving artifact information')
    parser.add_argument('--jobs', type=int, default=DEFAULT_MAX_WORKERS,
                        help=f'Concurrent repository requests. Default: {DEFAULT_MAX_WORKERS}')
    parser.add_argument('--timeout', type=float, default=30,
                        help='Per-request timeout in seconds. Default: 30')
    parser.add_argument('--google-repo', default=GOOGLE_MAVEN_URL,
                        help='Google Maven repository root (androidx, com.google.android)')
    parser.add_argument('--central-repo', default=MAVEN_CENTRAL_URL,
                        help='Maven Central repository root')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--loglevel',
                        choices=['DEBUG', 'INFO', 'WARN', 'ERROR'],
                        help='Set log level')
    return parser


def run(args) -> int:
    """Parse the report, retrieve artifact information and print it."""
    try:
        dependencies = DependencyReportParser.parse_input(args.input, skip_pretty=args.skip_pretty)
    except ReportError as e:
        logger.error(f"Error parsing dependency report: {e}")
        print(f"Error parsing dependency report: {e}", file=sys.stderr)
        return 1

    logger.info(f"Loaded {len(dependencies)} dependencies from the report")

    if args.no_fetch or args.output_format == 'list':
        sys.stdout.write(OutputFormatter.format_as_list(dependencies))
        return 0

    with MavenRepositoryClient(google_url=args.google_repo, central_url=args.central_repo,
                               timeout=args.timeout) as client:
        result = client.retrieve_all(dependencies, max_workers=args.jobs)

    if args.output_format == 'sbom':
        sys.stdout.write(OutputFormatter.format_as_sbom(dependencies, result.infos))
    else:
        sys.stdout.write(OutputFormatter.format_as_csv(dependencies, result.infos))

    if result.has_errors:
        logger.error("finished but an error occurred in some requests")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.loglevel)

    try:
        return run(args)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
