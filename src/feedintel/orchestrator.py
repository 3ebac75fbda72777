#!/usr/bin/env python3
"""
Selection orchestrator.

Tracks which sources are selected, owns the active working set and
sequences fetches and report requests. Every selection change bumps a
generation counter; a load applies its result only while the generation
it was issued under is still current, so stale fetches are discarded
rather than aborted.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

from .aggregator import Aggregator, sort_by_recency
from .config import AggregationConfig
from .exceptions import ConfigurationError, GenerationError, SourceError, ValidationError
from .fetcher import SourceFetcher
from .models.article import Article
from .models.feed import AggregationResult
from .models.source import Source
from .reports import FocusArea, ReportGenerator, ReportKind, ReportRequest, report_title

logger = logging.getLogger(__name__)


class SelectionMode(Enum):
    NONE = "none"
    SINGLE = "single"
    ALL = "all"
    CUSTOM = "custom"


@dataclass
class AggregationState:
    """Mutable view state owned by the orchestrator."""
    mode: SelectionMode = SelectionMode.NONE
    selected_source: Optional[Source] = None
    custom_sources: List[Source] = field(default_factory=list)
    articles: List[Article] = field(default_factory=list)
    pick_mode: bool = False
    picked_guids: Set[str] = field(default_factory=set)
    is_loading: bool = False
    is_auto_refreshing: bool = False
    is_generating_report: bool = False
    error: Optional[str] = None
    report: Optional[str] = None
    report_title: Optional[str] = None
    report_error: Optional[str] = None
    report_articles: List[Article] = field(default_factory=list)

    def clear_picks(self) -> None:
        """Leave pick mode and forget every pick."""
        self.pick_mode = False
        self.picked_guids = set()


class SelectionOrchestrator:
    """Drives source selection, working-set loading and report requests."""

    def __init__(self, sources: Iterable[Source], fetcher: SourceFetcher, aggregator: Aggregator,
                 report_generator: Optional[ReportGenerator] = None,
                 config: Optional[AggregationConfig] = None):
        """
        Initialize orchestrator.

        Args:
            sources: Configured fetchable sources, in display order
            fetcher: Single-source fetcher
            aggregator: Multi-source aggregator
            report_generator: Collaborator that writes reports
            config: Working-set and refresh settings
        """
        self.sources = [source for source in sources if not source.is_sentinel]
        self.fetcher = fetcher
        self.aggregator = aggregator
        self.report_generator = report_generator
        self.config = config or AggregationConfig()
        self.state = AggregationState()
        self._generation = 0
        self._refresh_task: Optional[asyncio.Task] = None

    # Supersession

    def _begin_selection(self) -> int:
        self._generation += 1
        # The new selection owns the loading indicators from here on
        self.state.is_loading = False
        self.state.is_auto_refreshing = False
        return self._generation

    def _is_current(self, token: int) -> bool:
        return token == self._generation

    # Selection

    async def select_source(self, source: Source) -> None:
        """
        Select one source and load it in the foreground.

        Selecting the all-sources sentinel runs the all-sources aggregation
        instead.

        Raises:
            SourceError: If the fetch fails while this selection is current
        """
        if source.is_sentinel:
            await self.fetch_all_sources()
            return

        token = self._begin_selection()
        state = self.state
        state.mode = SelectionMode.SINGLE
        state.selected_source = source
        state.custom_sources = []
        state.clear_picks()

        await self._load_single(source, token, background=False)

    async def fetch_all_sources(self) -> AggregationResult:
        """Aggregate every configured source into the working set."""
        token = self._begin_selection()
        state = self.state
        state.mode = SelectionMode.ALL
        state.selected_source = None
        state.custom_sources = []
        state.clear_picks()
        state.articles = []
        state.error = None
        state.is_loading = True

        result = await self.aggregator.aggregate_all(self.sources)

        if not self._is_current(token):
            logger.debug("Discarding superseded all-sources aggregation")
            return result

        state.articles = list(result.articles)
        state.is_loading = False
        if result.all_failed:
            state.error = f"Failed to load all feeds: {result.summary()}"
            logger.error(state.error)
        return result

    def toggle_custom_source(self, source: Source) -> None:
        """Add or remove a source from the custom set. Never fetches."""
        if source.is_sentinel:
            raise ValidationError("The all-sources entry cannot be part of a custom selection",
                                  source=source.url)

        self._begin_selection()
        state = self.state
        custom = list(state.custom_sources)
        if source in custom:
            custom.remove(source)
        else:
            custom.append(source)

        state.custom_sources = custom
        state.selected_source = None
        state.articles = []
        state.error = None
        state.clear_picks()
        state.mode = SelectionMode.CUSTOM if custom else SelectionMode.NONE

    def toggle_pick_mode(self) -> bool:
        """
        Enter or leave pick mode, clearing any picks.

        Returns:
            True if pick mode is now on
        """
        state = self.state
        if state.mode is not SelectionMode.SINGLE or not state.articles:
            raise ValidationError("Picking articles requires a single source with loaded articles",
                                  mode=state.mode.value, articles=len(state.articles))

        enabled = not state.pick_mode
        state.clear_picks()
        state.pick_mode = enabled
        return enabled

    def toggle_article_pick(self, guid: str) -> bool:
        """
        Pick or unpick an article of the working set.

        Returns:
            True if the article is now picked
        """
        state = self.state
        if not state.pick_mode:
            raise ValidationError("Article picking is not enabled")
        if guid not in {article.guid for article in state.articles}:
            raise ValidationError(f"Article {guid} is not in the current working set", guid=guid)

        if guid in state.picked_guids:
            state.picked_guids.discard(guid)
            return False
        state.picked_guids.add(guid)
        return True

    @property
    def picked_articles(self) -> List[Article]:
        """Picked articles in working-set order."""
        picked = self.state.picked_guids
        return [article for article in self.state.articles if article.guid in picked]

    # Loading

    async def _load_single(self, source: Source, token: int, background: bool) -> None:
        state = self.state
        if background:
            state.is_auto_refreshing = True
        else:
            state.is_loading = True
            state.articles = []
            state.error = None

        try:
            result = await self.fetcher.fetch(source.url)
        except SourceError as e:
            if not self._is_current(token):
                logger.debug(f"Ignoring superseded failure for {source.name}: {e}")
                return
            state.error = f"Failed to load feed from {source.name}: {e}"
            self._finish_load(background)
            logger.error(state.error)
            if not background:
                raise
            return
        except Exception:
            if self._is_current(token):
                self._finish_load(background)
            raise

        if not self._is_current(token):
            logger.debug(f"Discarding superseded result for {source.name}")
            return

        state.articles = list(result.items)
        state.error = None
        if background and state.picked_guids:
            state.picked_guids &= {article.guid for article in state.articles}
        self._finish_load(background)
        logger.info(f"Loaded {len(state.articles)} articles from {source.name}")

    def _finish_load(self, background: bool) -> None:
        if background:
            self.state.is_auto_refreshing = False
        else:
            self.state.is_loading = False

    async def refresh(self) -> bool:
        """
        Reload the selected single source in the background.

        Returns:
            True if a refresh was issued
        """
        state = self.state
        if state.mode is not SelectionMode.SINGLE or state.selected_source is None:
            return False
        if state.is_loading or state.is_auto_refreshing:
            logger.debug("Refresh skipped, a load is already in flight")
            return False

        await self._load_single(state.selected_source, self._generation, background=True)
        return True

    def start_auto_refresh(self) -> asyncio.Task:
        """Start refreshing the selected source periodically. Needs a running loop."""
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.ensure_future(self._auto_refresh_loop())
        return self._refresh_task

    async def stop_auto_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _auto_refresh_loop(self) -> None:
        interval = self.config.refresh_interval_seconds
        logger.info(f"Auto-refresh every {interval}s")
        while True:
            await asyncio.sleep(interval)
            try:
                await self.refresh()
            except Exception as e:
                logger.error(f"Auto-refresh failed: {e}", exc_info=True)

    # Reports

    async def request_report(self, kind: ReportKind, focus: Optional[FocusArea] = None) -> str:
        """
        Validate the operative article set and ask the generator for a report.

        Raises:
            ValidationError: If a precondition fails; the generator is not called
            GenerationError: If the generator fails
        """
        state = self.state
        if state.is_generating_report:
            raise ValidationError("A report is already being generated")
        if self.report_generator is None:
            raise ConfigurationError('report_generator', "no report generator configured")
        if kind is ReportKind.FOCUSED and focus is None:
            raise ValidationError("Focused reports require a focus area")

        state.is_generating_report = True
        state.report_error = None
        try:
            try:
                articles, source_names = await self._report_articles(kind)
            except ValidationError as e:
                state.report_error = e.message
                raise

            request = ReportRequest(
                kind=kind,
                articles=tuple(articles),
                title=report_title(kind, focus),
                focus=focus,
                source_names=source_names
            )
            logger.info(f"Requesting {request.title} over {len(request.articles)} articles")

            try:
                text = await self.report_generator.generate(request)
            except Exception as e:
                error = GenerationError(kind.value, e)
                state.report_error = error.message
                logger.error(f"Report generation failed: {error.message}")
                raise error from e

            state.report = text
            state.report_title = request.title
            state.report_articles = list(request.articles)
            return text
        finally:
            state.is_generating_report = False

    async def _report_articles(self, kind: ReportKind) -> Tuple[List[Article], Tuple[str, ...]]:
        if kind is ReportKind.CUSTOM:
            return await self._custom_articles()
        if kind is ReportKind.FROM_SELECTION:
            return self._selection_articles()
        return self._working_set_articles()

    def _working_set_articles(self) -> Tuple[List[Article], Tuple[str, ...]]:
        state = self.state
        if state.mode is SelectionMode.SINGLE:
            source_names = (state.selected_source.name,)
        elif state.mode is SelectionMode.ALL:
            source_names = tuple(source.name for source in self.sources)
        else:
            raise ValidationError("Select a source or all sources before requesting a report",
                                  mode=state.mode.value)

        minimum = self.config.min_report_articles
        found = len(state.articles)
        if found < minimum:
            raise ValidationError(
                f"A minimum of {minimum} articles are required to generate a report. Found only {found}.",
                found=found
            )
        return sort_by_recency(state.articles)[:self.config.report_article_count], source_names

    async def _custom_articles(self) -> Tuple[List[Article], Tuple[str, ...]]:
        state = self.state
        sources = list(state.custom_sources)
        if state.mode is not SelectionMode.CUSTOM or not sources:
            raise ValidationError("Select at least one source for a custom report")

        token = self._generation
        result = await self.aggregator.aggregate_subset(sources)
        if not self._is_current(token):
            raise ValidationError("The source selection changed while the report was being prepared")

        minimum = self.config.min_report_articles
        found = len(result.articles)
        if found < minimum:
            raise ValidationError(
                f"A minimum of {minimum} articles are required across selected feeds. Found only {found}.",
                found=found
            )
        return list(result.articles[:self.config.report_article_count]), tuple(source.name for source in sources)

    def _selection_articles(self) -> Tuple[List[Article], Tuple[str, ...]]:
        state = self.state
        if not state.pick_mode or not state.picked_guids:
            raise ValidationError("Select at least one article to generate a report")
        return self.picked_articles, (state.selected_source.name,)
