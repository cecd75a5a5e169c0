"""
PerkHub — Search-and-Filter View
==================================

What:  State and behaviour of the "All Perks" page: debounced search by title,
       merchant filter, derived merchant dropdown, inline error with retry.
How:   PerkSearchView owns the page state and a DebounceTimer. Every text or
       filter change re-arms the timer; the fetch runs with the state as of
       the moment it fires.

State:
    query            search text, source of truth for the input box
    merchant_filter  selected merchant, "" = all merchants
    perks            last successful fetch result
    merchant_options derived from perks (see derive_merchant_options)
    loading          True while the latest fetch is in flight
    error            last failure message, "" = none

Ordering:
    Each fetch takes a sequence number. A response that is not the latest
    issued is dropped, so an older request resolving late never overwrites
    fresher results. After teardown() nothing mutates the state.

Single-threaded asyncio; no locks.
"""

import asyncio
import logging
from typing import Coroutine, Dict, Iterable, List, Optional, Set, Tuple

from perkhub.client.api import PerkApiClient
from perkhub.client.render import render_view
from perkhub.client.scheduling import DebounceTimer, Scheduler
from perkhub.config import settings
from perkhub.exceptions import PerkFetchError
from perkhub.schemas.perk import PerkRead

logger = logging.getLogger(__name__)


def build_query_params(query: str, merchant: str) -> Dict[str, str]:
    """
    Query parameters for GET /perks/all.

    Values are trimmed; a parameter whose trimmed value is empty is left out
    entirely rather than sent as an empty string.
    """
    params: Dict[str, str] = {}
    search = (query or "").strip()
    if search:
        params["search"] = search
    merchant = (merchant or "").strip()
    if merchant:
        params["merchant"] = merchant
    return params


def derive_merchant_options(perks: Iterable[PerkRead]) -> List[str]:
    """
    Distinct non-empty merchant names in first-seen order.

    ["A", "", "B", "A", None] -> ["A", "B"]
    """
    seen: Dict[str, None] = {}
    for perk in perks:
        merchant = perk.merchant
        if merchant and merchant.strip() and merchant not in seen:
            seen[merchant] = None
    return list(seen)


class PerkSearchView:
    """
    View-model for the All Perks page.

    Lifecycle:
        await view.mount()      one immediate unfiltered fetch
        view.set_query("...")   re-arms the debounce timer
        await view.search_now() fetch immediately, timer disarmed
        view.teardown()         timer and in-flight fetches cancelled

    Also an async context manager: mount on enter, teardown on exit.
    """

    def __init__(
        self,
        client: PerkApiClient,
        *,
        debounce_ms: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self._client = client
        quiet_ms = settings.search_debounce_ms if debounce_ms is None else debounce_ms
        self._timer = DebounceTimer(quiet_ms / 1000, scheduler)

        self.query = ""
        self.merchant_filter = ""
        self.perks: List[PerkRead] = []
        self.loading = False
        self.error = ""

        self._active = False
        self._mounted = False
        self._request_seq = 0
        self._results_version = 0
        self._merchant_cache: Tuple[int, List[str]] = (0, [])
        self._tasks: Set[asyncio.Task] = set()

    # ── Derived state ─────────────────────────────────────────────────────

    @property
    def merchant_options(self) -> List[str]:
        """Dropdown entries, recomputed only when a fetch replaced `perks`."""
        version, options = self._merchant_cache
        if version != self._results_version:
            options = derive_merchant_options(self.perks)
            self._merchant_cache = (self._results_version, options)
        return list(options)

    @property
    def search_pending(self) -> bool:
        """True while a debounced search is armed but has not fired."""
        return self._timer.pending

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def mount(self) -> None:
        """Initial load: exactly one fetch, without waiting out the quiet period."""
        if self._mounted:
            return
        self._mounted = True
        self._active = True
        await self.load_perks()

    def teardown(self) -> None:
        """Cancel the pending timer and every fetch this view spawned."""
        self._active = False
        self._timer.cancel()
        for task in list(self._tasks):
            task.cancel()

    async def settle(self) -> None:
        """Wait until every fetch spawned by the debounce timer has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def __aenter__(self) -> "PerkSearchView":
        await self.mount()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.teardown()
        await self.settle()

    # ── Input events ──────────────────────────────────────────────────────

    def set_query(self, text: str) -> None:
        if text == self.query:
            return
        self.query = text
        self._schedule_search()

    def set_merchant_filter(self, merchant: str) -> None:
        if merchant == self.merchant_filter:
            return
        self.merchant_filter = merchant
        self._schedule_search()

    def reset(self) -> None:
        """
        Clear search text and merchant filter.

        Issues no fetch itself; the change re-arms the debounce timer, which
        then loads the unfiltered list once.
        """
        if not self.query and not self.merchant_filter:
            return
        self.query = ""
        self.merchant_filter = ""
        self._schedule_search()

    async def search_now(self) -> None:
        """Manual "Search Now": fetch immediately and disarm any pending timer."""
        self._timer.cancel()
        await self.load_perks()

    async def retry(self) -> None:
        """Retry from the error banner ("Try Again"); same fetch, user-initiated only."""
        await self.load_perks()

    # ── Fetch ─────────────────────────────────────────────────────────────

    async def load_perks(self) -> None:
        """
        Fetch GET /perks/all with the current query and merchant filter.

        success: perks replaced, error cleared
        failure: perks kept, error set from the server message or fallback
        always:  loading cleared last, only by the latest request

        A view that is not mounted (or already torn down) fetches nothing.
        """
        if not self._active:
            return
        self._request_seq += 1
        seq = self._request_seq
        params = build_query_params(self.query, self.merchant_filter)
        self.loading = True

        try:
            perks = await self._client.list_all_perks(params)
        except PerkFetchError as exc:
            if self._is_current(seq):
                logger.error("Failed to load perks: %s", exc.message)
                self.error = exc.message
            else:
                logger.debug("Dropping stale failure for request #%d", seq)
        else:
            if self._is_current(seq):
                self.perks = perks
                self._results_version += 1
                self.error = ""
            else:
                logger.debug("Dropping stale response for request #%d", seq)
        finally:
            if self._is_current(seq):
                self.loading = False

    def _is_current(self, seq: int) -> bool:
        return self._active and seq == self._request_seq

    def _schedule_search(self) -> None:
        if not self._active:
            return
        self._timer.schedule(lambda: self._spawn(self.load_perks()))

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ── Rendering ─────────────────────────────────────────────────────────

    def render(self) -> str:
        return render_view(self)
