#!/usr/bin/env python3
"""
Report generation interface.

The orchestrator hands a validated, ordered article sequence to a
``ReportGenerator``; producing the text itself happens elsewhere.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .models.article import Article


class ReportKind(Enum):
    """Report variants a generator can be asked for."""
    EXECUTIVE = "executive"
    FOCUSED = "focused"
    FULL = "full"
    CUSTOM = "custom"
    FROM_SELECTION = "from_selection"


class FocusArea(Enum):
    """Alert categories for focused reports."""
    KEY_SECURITY_ALERTS = "Key Security Alerts"
    MAJOR_CYBER_INCIDENTS = "Major Cyber Incidents"
    IMPACT_TO_CONGLOMERATE = "Impact to Conglomerate"


REPORT_TITLES = {
    ReportKind.EXECUTIVE: "Executive Intelligence Briefing",
    ReportKind.FULL: "Full Intelligence Report",
    ReportKind.CUSTOM: "Custom Intelligence Report",
    ReportKind.FROM_SELECTION: "Report from Selected Articles",
}


def report_title(kind: ReportKind, focus: Optional[FocusArea] = None) -> str:
    """Display title for a report; focused reports are titled by their focus."""
    if kind is ReportKind.FOCUSED:
        return focus.value if focus else "Focused Intelligence Report"
    return REPORT_TITLES[kind]


@dataclass(frozen=True)
class ReportRequest:
    """Everything a generator needs to write one report."""
    kind: ReportKind
    articles: Tuple[Article, ...]
    title: str
    focus: Optional[FocusArea] = None
    source_names: Tuple[str, ...] = ()

    def citations(self) -> Iterator[Tuple[int, Article]]:
        """Yield ``(index, article)`` with stable 1-based indexes for citing."""
        return enumerate(self.articles, start=1)


class ReportGenerator(ABC):
    """Turns a report request into text."""

    @abstractmethod
    async def generate(self, request: ReportRequest) -> str:
        """
        Generate the report text.

        Args:
            request: Validated report request

        Returns:
            Report text
        """
        pass
