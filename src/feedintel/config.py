#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for feed, aggregation and logging
settings, read from environment variables with defaults and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, List

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; FeedIntel/1.0)"


@dataclass
class FeedConfig:
    """Per-feed retrieval and parsing settings."""
    timeout: int = 10
    user_agent: str = DEFAULT_USER_AGENT
    max_concurrent: int = 8
    items_per_feed: int = 15


@dataclass
class AggregationConfig:
    """Working-set and report selection settings."""
    max_all_articles: int = 50
    min_report_articles: int = 5
    report_article_count: int = 5
    refresh_interval_seconds: float = 4 * 60 * 60


@dataclass
class LoggingConfig:
    """Logging settings."""
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class Config:
    """Master configuration container."""
    feeds: FeedConfig = field(default_factory=FeedConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    log: LoggingConfig = field(default_factory=LoggingConfig)
    sources_file: Optional[str] = None


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""
        feed_config = FeedConfig(
            timeout=self._get_int('FEED_TIMEOUT', 10),
            user_agent=os.getenv('FEED_USER_AGENT', DEFAULT_USER_AGENT),
            max_concurrent=self._get_int('MAX_CONCURRENT_FEEDS', 8),
            items_per_feed=self._get_int('ITEMS_PER_FEED', 15)
        )

        aggregation_config = AggregationConfig(
            max_all_articles=self._get_int('MAX_ALL_ARTICLES', 50),
            min_report_articles=self._get_int('MIN_REPORT_ARTICLES', 5),
            report_article_count=self._get_int('REPORT_ARTICLE_COUNT', 5),
            refresh_interval_seconds=self._get_float('REFRESH_INTERVAL_SECONDS', 4 * 60 * 60)
        )

        logging_config = LoggingConfig(
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true'
        )

        config = Config(
            feeds=feed_config,
            aggregation=aggregation_config,
            log=logging_config,
            sources_file=os.getenv('FEED_SOURCES_FILE') or None
        )

        validate_config(config)
        return config

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        if value is None or value.strip() == '':
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(key, f"expected an integer, got {value!r}")

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        if value is None or value.strip() == '':
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(key, f"expected a number, got {value!r}")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.log.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.log.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)


def validate_config(config: Config) -> None:
    """Validate configuration values, reporting every problem at once."""
    errors: List[str] = []

    if config.feeds.timeout < 1:
        errors.append("FEED_TIMEOUT must be at least 1 second")

    if config.feeds.max_concurrent < 1 or config.feeds.max_concurrent > 50:
        errors.append("MAX_CONCURRENT_FEEDS must be between 1 and 50")

    if config.feeds.items_per_feed < 1:
        errors.append("ITEMS_PER_FEED must be at least 1")

    if config.aggregation.max_all_articles < 1:
        errors.append("MAX_ALL_ARTICLES must be at least 1")

    if config.aggregation.min_report_articles < 1:
        errors.append("MIN_REPORT_ARTICLES must be at least 1")

    if config.aggregation.report_article_count < config.aggregation.min_report_articles:
        errors.append("REPORT_ARTICLE_COUNT must not be below MIN_REPORT_ARTICLES")

    if config.aggregation.refresh_interval_seconds <= 0:
        errors.append("REFRESH_INTERVAL_SECONDS must be positive")

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.log.log_level not in valid_log_levels:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

    if errors:
        raise ConfigurationError('environment', '; '.join(errors))

    logger.debug("Configuration validation passed")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
