# seo_scout/crawler/frontier.py
"""
Frontier: the mutable traversal state of one crawl.

``pending`` keeps insertion order (first discovered, first visited),
``visited`` only grows, and the page budget caps ``visited``. A URL is never
in both sets at once.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Optional, Set

from seo_scout.errors import FrontierExhausted
from seo_scout.logger import get_logger

__all__ = ("Frontier", "FrontierState")

logger = get_logger("frontier")


class FrontierState(str, Enum):
    IDLE = "idle"
    SEEDED = "seeded"
    DRAINING = "draining"
    EXHAUSTED = "exhausted"


class Frontier:
    """URL queue with duplicate suppression and a hard page budget."""

    def __init__(self, budget: int) -> None:
        if budget < 1:
            raise ValueError("budget must be >= 1")
        self.budget = budget
        # dict as an ordered set
        self._pending: Dict[str, None] = {}
        self._visited: Set[str] = set()
        self.state = FrontierState.IDLE

    # ------------------------------------------------------------------ #
    # Read-only views                                                     #
    # ------------------------------------------------------------------ #
    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def exhausted(self) -> bool:
        return self.state is FrontierState.EXHAUSTED

    @property
    def budget_left(self) -> int:
        return self.budget - len(self._visited)

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, url: object) -> bool:
        return url in self._pending or url in self._visited

    # ------------------------------------------------------------------ #
    # Operations                                                          #
    # ------------------------------------------------------------------ #
    def seed(self, urls: Iterable[str]) -> int:
        """Add start URLs to ``pending``; returns how many were actually new."""
        if self.exhausted:
            raise FrontierExhausted("cannot seed an exhausted frontier")
        added = sum(1 for url in urls if self._add(url))
        if self.state is FrontierState.IDLE:
            self.state = FrontierState.SEEDED
        logger.debug("Seeded %d URL(s), %d pending", added, len(self._pending))
        return added

    def take(self) -> Optional[str]:
        """Pop the oldest pending URL, or ``None`` once the frontier is exhausted."""
        if self.exhausted:
            raise FrontierExhausted("take() called on an exhausted frontier")
        if not self._pending or len(self._visited) >= self.budget:
            self.state = FrontierState.EXHAUSTED
            if self._pending:
                logger.info("Page budget of %d reached, %d URL(s) left unvisited",
                            self.budget, len(self._pending))
            return None
        url = next(iter(self._pending))
        del self._pending[url]
        self.state = FrontierState.DRAINING
        return url

    def mark_visited(self, url: str) -> None:
        self._pending.pop(url, None)
        self._visited.add(url)

    def offer(self, url: str) -> bool:
        """Queue a newly discovered URL unless it is already known."""
        if self.exhausted:
            return False
        return self._add(url)

    def _add(self, url: str) -> bool:
        if url in self._visited or url in self._pending:
            return False
        self._pending[url] = None
        return True
