#!/usr/bin/env python3
"""
Source catalog commands.
"""

import json
from argparse import Namespace

from .base import BaseCommand
from ..formatters import format_source_list


class SourcesCommand(BaseCommand):
    """Inspect the configured feed sources."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute sources subcommand."""
        try:
            if subcommand == "list":
                return self.list(args)
            else:
                available = ", ".join(self.get_available_subcommands())
                self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
                return 1

        except Exception as e:
            return self.handle_error(e, f"sources {subcommand}")

    def list(self, args: Namespace) -> int:
        """List configured sources in catalog order."""
        registry = self.source_registry

        if getattr(args, 'json', False):
            payload = [{'name': source.name, 'url': source.url} for source in registry]
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        print(f"{len(registry)} configured sources:")
        print(format_source_list(registry.list_sources(), registry.sentinel), end="")
        return 0
