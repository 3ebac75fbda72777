#!/usr/bin/env python3
"""
Base command class for the command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability.
"""

import logging
from abc import ABC, abstractmethod
from argparse import Namespace
from typing import List, Tuple

from ..aggregator import Aggregator
from ..container import get_container
from ..exceptions import ConfigurationError, SourceError, ValidationError
from ..fetcher import SourceFetcher
from ..transport import Transport

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all command endpoints.

    Provides access to configuration, the source registry and the fetch
    pipeline through the dependency injection container.
    """

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def source_registry(self):
        """Get source registry from container."""
        return self._container.get('source_registry')

    @property
    def feed_parser(self):
        """Get feed parser from container."""
        return self._container.get('feed_parser')

    def create_transport(self) -> Transport:
        """Create a new transport; use it as an async context manager."""
        return self._container.get('transport')

    def build_pipeline(self, transport: Transport) -> Tuple[SourceFetcher, Aggregator]:
        """Wire a fetcher and an aggregator over an open transport."""
        fetcher = SourceFetcher(transport, self.feed_parser)
        aggregator = Aggregator(
            fetcher,
            feed_config=self.config.feeds,
            aggregation_config=self.config.aggregation
        )
        return fetcher, aggregator

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """Get list of available subcommands for this command."""
        methods = []
        for attr_name in dir(type(self)):
            if attr_name.startswith('_') or isinstance(getattr(type(self), attr_name), property):
                continue
            if callable(getattr(self, attr_name)) and attr_name not in [
                    'execute', 'get_available_subcommands', 'handle_error',
                    'create_transport', 'build_pipeline']:
                methods.append(attr_name)
        return methods

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        # Expected failures are reported without a traceback
        if isinstance(error, (SourceError, ValidationError, ConfigurationError, LookupError)):
            self.logger.error(error_msg)
        else:
            self.logger.error(error_msg, exc_info=True)

        if isinstance(error, (FileNotFoundError, LookupError)):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        elif isinstance(error, (ValueError, ValidationError)):
            return 22
        elif isinstance(error, ConfigurationError):
            return 78
        else:
            return 1
