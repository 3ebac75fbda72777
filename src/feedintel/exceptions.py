#!/usr/bin/env python3
"""
Standardized exception hierarchy for feed ingestion and aggregation.

Every error carries a human-readable message, a machine-readable code and
a context dictionary so callers can log or serialize it uniformly.
"""

from typing import Optional, Dict, Any


class FeedIntelError(Exception):
    """Base exception for all feedintel errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Source-related exceptions
class SourceError(FeedIntelError):
    """Base exception for feed source errors."""
    pass


class TransportError(SourceError):
    """Feed could not be retrieved (non-2xx status or network failure)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        if status is not None:
            message = f"Failed to fetch feed {url}. Status: {status} {reason}".rstrip()
        else:
            message = f"Failed to fetch feed {url}: {reason or 'network error'}"
        context = {
            'url': url,
            'status': status,
            'reason': reason
        }
        super().__init__(message, context=context)
        self.url = url
        self.status = status
        self.reason = reason


class ParseError(SourceError):
    """Feed body is not well-formed XML or has no recognizable feed root."""

    def __init__(self, url: str, issue: str):
        message = f"Failed to parse feed {url}: {issue}"
        context = {
            'url': url,
            'issue': issue
        }
        super().__init__(message, context=context)
        self.url = url
        self.issue = issue


# Orchestration exceptions
class ValidationError(FeedIntelError):
    """A local precondition was not met; raised before any network call."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message, context=context)


class GenerationError(FeedIntelError):
    """The report generator failed to produce a report."""

    def __init__(self, report_kind: str, original_error: Exception):
        message = str(original_error) or f"Failed to generate {report_kind} report"
        context = {
            'report_kind': report_kind,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(FeedIntelError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)
