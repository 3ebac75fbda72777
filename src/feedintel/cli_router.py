#!/usr/bin/env python3
"""
CLI Router for the feed aggregator.
"""

import argparse
import logging
import sys
from typing import Optional, List

from .commands import get_command, COMMANDS
from .config import get_config_manager
from .exceptions import ConfigurationError
from .env_loader import load_env_file

logger = logging.getLogger(__name__)


class CLIRouter:
    """
    CLI router for feed commands.

    Command structure:
    - feedintel sources list
    - feedintel feed fetch --source "Krebs on Security" --limit 5
    - feedintel feed aggregate --sources "CISA News" "The Record" --json
    """

    def __init__(self, container=None):
        """Initialize CLI router."""
        self.container = container
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='feedintel',
            description="Security news feed ingestion and aggregation",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{command}'
        )

        self._add_sources_parser(subparsers)
        self._add_feed_parser(subparsers)

        return parser

    def _add_sources_parser(self, subparsers):
        """Add sources command parser."""
        sources_parser = subparsers.add_parser(
            'sources',
            help='Feed source catalog operations'
        )

        sources_subparsers = sources_parser.add_subparsers(
            dest='subcommand',
            help='Source operations',
            metavar='{list}'
        )

        list_parser = sources_subparsers.add_parser('list', help='List configured feed sources')
        list_parser.add_argument('--json', action='store_true', help='Output JSON')

    def _add_feed_parser(self, subparsers):
        """Add feed command parser."""
        feed_parser = subparsers.add_parser(
            'feed',
            help='Feed fetching and aggregation operations'
        )

        feed_subparsers = feed_parser.add_subparsers(
            dest='subcommand',
            help='Feed operations',
            metavar='{fetch,aggregate}'
        )

        fetch_parser = feed_subparsers.add_parser('fetch', help='Fetch and parse a single feed')
        fetch_parser.add_argument('--source', required=True, help='Source name or URL ("All Sources" aggregates every feed)')
        fetch_parser.add_argument('--limit', type=int, default=None, help='Show at most N items')
        fetch_parser.add_argument('--json', action='store_true', help='Output JSON')

        aggregate_parser = feed_subparsers.add_parser('aggregate', help='Aggregate several feeds into one working set')
        aggregate_parser.add_argument('--sources', nargs='+', default=None, help='Source names or URLs (default: all sources, capped)')
        aggregate_parser.add_argument('--json', action='store_true', help='Output JSON')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  python run.py sources list
  python run.py feed fetch --source "Krebs on Security"
  python run.py feed fetch --source https://www.cisa.gov/news.xml --json
  python run.py feed aggregate
  python run.py feed aggregate --sources "CISA News" "The Record"
"""

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]

            parsed_args = self.parser.parse_args(args)

            if not parsed_args.command:
                self.parser.print_help()
                return 1

            return self._handle_command(parsed_args)

        except SystemExit as e:
            # argparse calls sys.exit() on error or help
            return e.code if e.code is not None else 0
        except Exception as e:
            logger.error(f"CLI routing error: {e}", exc_info=True)
            return 1

    def _handle_command(self, args: argparse.Namespace) -> int:
        """Handle command structure."""
        logger.debug(f"Handling command: {args.command}")

        if args.command not in COMMANDS:
            available = ', '.join(COMMANDS.keys())
            logger.error(f"Unknown command '{args.command}'. Available: {available}")
            return 1

        subcommand = getattr(args, 'subcommand', None)
        if not subcommand:
            logger.error(f"No subcommand specified for '{args.command}'")
            self.parser.parse_args([args.command, '--help'])
            return 1

        try:
            command = get_command(args.command, self.container)
            return command.execute(subcommand, args)
        except Exception as e:
            logger.error(f"Error executing {args.command} {subcommand}: {e}", exc_info=True)
            return 1


def main(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    load_env_file()

    try:
        get_config_manager().update_logging()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 78

    router = CLIRouter()
    return router.route_command(args)


if __name__ == '__main__':
    sys.exit(main())
