"""Search service layer: concurrent fan-out across bibliographic sources."""

from __future__ import annotations

import math
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from SourceFinder.core.models import SearchResult, Suggestion
from SourceFinder.core.query import SearchRequest
from SourceFinder.services.ranker import Ranker
from SourceFinder.utils.log import log

DEFAULT_OVERFETCH_FACTOR = 1.5
DEFAULT_TOTAL_MULTIPLIER = 3
_SATURATION_RATIO = 0.5


class SourceAdapter(Protocol):
    """Protocol for an external bibliographic metadata provider.

    Implementations must never raise from ``search``: network errors, timeouts,
    non-success responses and malformed payloads all produce an empty list.
    """

    name: str
    supported_fields: frozenset[str]

    def search(self, request: SearchRequest) -> list[Suggestion]:
        """Search this provider and return normalized suggestions."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by the source."""
        raise NotImplementedError


@dataclass(slots=True)
class SuggestionRouter:
    """Turn one search request into one ranked, deduplicated result page.

    Attributes:
        sources: Registered sources, in registration order.
        ranker: Deduplicates and scores the pooled suggestions.
        request_timeout: Overall deadline in seconds for one search; sources
            still pending when it elapses are abandoned. ``None`` waits for all.
        overfetch_factor: Per-source page size multiplier, anticipating loss
            during deduplication.
        total_multiplier: Multiplier applied to the ranked count when sources
            look saturated (see ``estimate_total``).
        max_workers: Thread pool size; defaults to one thread per source used.
    """

    sources: tuple[SourceAdapter, ...]
    ranker: Ranker = field(default_factory=Ranker)
    request_timeout: float | None = None
    overfetch_factor: float = DEFAULT_OVERFETCH_FACTOR
    total_multiplier: int = DEFAULT_TOTAL_MULTIPLIER
    max_workers: int | None = None

    def search(self, request: SearchRequest) -> SearchResult:
        """Search every source that supports the request field.

        Never raises: when no source supports the field, or every source fails,
        the result is empty.

        Args:
            request: Caller request; ``offset`` is forwarded to the sources.

        Returns:
            The first ``max_results`` ranked suggestions with an estimated total.
        """
        selected = self.select_sources(request.field)
        if not selected:
            log.info("No search source supports field=%s", request.field)
            return SearchResult.empty()
        if request.max_results <= 0:
            return SearchResult.empty()

        per_source_limit = math.ceil(request.max_results * self.overfetch_factor)
        pool = self._gather(selected, request.with_max_results(per_source_limit))

        ranked = self.ranker.rank_and_dedupe(request.query, pool, request.field)
        page = tuple(ranked[: request.max_results])
        total = estimate_total(
            len(ranked),
            per_source_limit=per_source_limit,
            source_count=len(selected),
            multiplier=self.total_multiplier,
        )
        log.info(
            "Search completed: query=%r field=%s sources=%d pool=%d ranked=%d total~%d",
            request.query,
            request.field,
            len(selected),
            len(pool),
            len(ranked),
            total,
        )
        return SearchResult(suggestions=page, total=total, has_more=len(ranked) > request.max_results)

    def select_sources(self, field_qualifier: str) -> tuple[SourceAdapter, ...]:
        """Return sources whose supported fields include ``field_qualifier``."""
        return tuple(source for source in self.sources if field_qualifier in source.supported_fields)

    def close(self) -> None:
        """Close all sources and release external resources."""
        failed_sources: list[str] = []
        for source in self.sources:
            close_func = getattr(source, "close", None)
            if callable(close_func):
                source_name = getattr(source, "name", "unknown")
                try:
                    close_func()
                except Exception as error:  # noqa: BLE001 - close failure must be isolated
                    failed_sources.append(source_name)
                    log.warning("Search source close failed: source=%s error=%s", source_name, error)
        if failed_sources:
            log.warning("Search router close completed with failures: %s", ", ".join(failed_sources))

    def _gather(self, sources: Sequence[SourceAdapter], request: SearchRequest) -> list[Suggestion]:
        """Run all sources concurrently and pool the successful results.

        Waits for every source to settle or for ``request_timeout`` to elapse.
        The pool follows registration order, never arrival order.
        """
        executor = ThreadPoolExecutor(
            max_workers=self.max_workers or len(sources),
            thread_name_prefix="source",
        )
        try:
            submitted: list[tuple[SourceAdapter, Future[list[Suggestion]]]] = [
                (source, executor.submit(source.search, request)) for source in sources
            ]
            _, pending = wait([future for _, future in submitted], timeout=self.request_timeout)

            pool: list[Suggestion] = []
            for source, future in submitted:
                source_name = getattr(source, "name", "unknown")
                if future in pending:
                    future.cancel()
                    log.warning(
                        "Search source abandoned at deadline: source=%s timeout=%ss",
                        source_name,
                        self.request_timeout,
                    )
                    continue
                try:
                    suggestions = future.result()
                except Exception as error:  # noqa: BLE001 - source failure must be isolated
                    log.warning("Search source failed: source=%s error=%s", source_name, error)
                    continue
                if not isinstance(suggestions, list):
                    log.warning(
                        "Search source returned %s instead of a list: source=%s",
                        type(suggestions).__name__,
                        source_name,
                    )
                    continue
                log.debug("Search source completed: source=%s count=%d", source_name, len(suggestions))
                pool.extend(suggestions)
            return pool
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


def estimate_total(
    ranked_count: int,
    *,
    per_source_limit: int,
    source_count: int,
    multiplier: int = DEFAULT_TOTAL_MULTIPLIER,
) -> int:
    """Estimate how many results exist upstream without a second round trip.

    When the ranked count reaches half of what the sources could return at
    most, the sources probably hold more, so the count is scaled by
    ``multiplier``; otherwise the ranked count is reported as is. This is a
    display hint, not a pagination contract.
    """
    max_possible = per_source_limit * source_count
    if ranked_count > 0 and ranked_count >= max_possible * _SATURATION_RATIO:
        return ranked_count * multiplier
    return ranked_count
