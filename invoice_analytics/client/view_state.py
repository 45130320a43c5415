"""
Per-view state for data fetched from the API.

Each view owns its own ``ViewSession``. A fetch takes a ticket from ``begin()``
and reports back through ``resolve`` or ``fail``; results for anything but the
latest ticket, or arriving after ``close()``, are dropped.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ViewState(Generic[T]):
    data: Optional[T] = None
    loading: bool = False
    error: Optional[str] = None


@dataclass
class ViewSession(Generic[T]):
    state: ViewState = field(default_factory=ViewState)
    closed: bool = False
    _ticket: int = 0

    def begin(self) -> int:
        self._ticket += 1
        self.state.loading = True
        self.state.error = None
        return self._ticket

    def _is_current(self, ticket: int) -> bool:
        if self.closed or ticket != self._ticket:
            logger.debug(f"Discarding stale result for ticket {ticket} (latest {self._ticket}, closed={self.closed})")
            return False
        return True

    def resolve(self, ticket: int, data: T) -> bool:
        if not self._is_current(ticket):
            return False
        self.state.data = data
        self.state.loading = False
        self.state.error = None
        return True

    def fail(self, ticket: int, error: Any) -> bool:
        if not self._is_current(ticket):
            return False
        self.state.loading = False
        self.state.error = getattr(error, "message", None) or str(error)
        return True

    def close(self) -> None:
        self.closed = True
        self.state.loading = False

    async def load(self, fetch: Callable[[], Awaitable[T]]) -> ViewState:
        """Run ``fetch`` under a fresh ticket and apply its outcome if still current."""
        ticket = self.begin()
        try:
            data = await fetch()
        except Exception as e:
            logger.warning(f"View fetch failed: {e}")
            self.fail(ticket, e)
        else:
            self.resolve(ticket, data)
        return self.state
