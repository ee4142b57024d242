"""In-memory full-text search over diary entries.

Keeps an inverted word index (token -> dates) and a content cache
(date -> text) built from a full scan of an ``EntryStore``. The pair is
held as one immutable ``IndexSnapshot`` that is rebuilt wholesale in a
background thread and swapped in by reference once complete, so queries
never see a half-built index.

Example::

    index = SearchIndex(FileEntryStore(store_config))
    for result in index.search("holiday"):
        print(result, highlight_spans(result.text, result.query))
    index.close()
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections import defaultdict
from collections.abc import Callable
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date

from loguru import logger

from ..core.exceptions import IndexClosedError
from ..core.utils.text import tokenize
from .config import SearchConfig
from .models import IndexSnapshot, IndexState, SearchResult
from .store import EntryStore

Listener = Callable[[IndexSnapshot], None]


class _BuildCancelled(Exception):
    """Internal signal: the index was closed while a rebuild was running."""


def build_snapshot(
    entries,
    clock: Callable[[], float] = time.monotonic,
    should_stop: Callable[[], bool] | None = None,
) -> IndexSnapshot:
    """Tokenize every entry and return a complete snapshot.

    Args:
        entries: Iterable of ``Entry``. A later entry for the same date wins.
        clock: Source of the completion timestamp recorded on the snapshot.
        should_stop: Checked before each entry; returning True abandons the build.
    """
    words: dict[str, set[date]] = defaultdict(set)
    contents: dict[date, str] = {}
    for entry in entries:
        if should_stop is not None and should_stop():
            raise _BuildCancelled
        contents[entry.date] = entry.text
        for token in tokenize(entry.text):
            words[token].add(entry.date)
    return IndexSnapshot(
        words={token: frozenset(days) for token, days in words.items()},
        contents=contents,
        built_at=clock(),
    )


def match_snapshot(snapshot: IndexSnapshot, query: str) -> list[SearchResult]:
    """Resolve a query against a snapshot.

    An entry matches when it contains the lowercased query as a token, or
    any token that contains the query or is contained in it. The second
    rule is deliberately permissive: "testing123" matches an entry that
    only has "testing".

    Returns:
        One result per matching date, ascending by date.
    """
    normalized = query.lower()
    matched: set[date] = set(snapshot.words.get(normalized, ()))
    for word, days in snapshot.words.items():
        if normalized in word or word in normalized:
            matched.update(days)

    return [
        SearchResult(date=day, text=snapshot.contents[day], query=query)
        for day in sorted(matched)
        if day in snapshot.contents
    ]


class SearchIndex:
    """Staleness-bounded inverted index over an entry store.

    Lifecycle is ``EMPTY -> BUILDING -> READY``, and ``READY -> BUILDING ->
    READY`` on refresh. At most one rebuild runs at a time; a refresh
    requested while one is in flight gets the same future back.

    Args:
        store: Corpus to index.
        config: Staleness window and build timeout.
        clock: Monotonic time source, in seconds. Injectable for tests.
    """

    def __init__(
        self,
        store: EntryStore,
        config: SearchConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.config = config or SearchConfig()
        self._clock = clock

        self._lock = threading.Lock()
        self._snapshot = IndexSnapshot()
        self._pending: Future | None = None
        self._generation = 0
        self._built_generation = 0
        self._closed = False
        self._cancel = threading.Event()
        self._listeners: list[Listener] = []
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="goodvibes-index")
        self.build_count = 0

    # ── Introspection ───────────────────────────────────────────────

    @property
    def state(self) -> IndexState:
        with self._lock:
            if self._pending is not None and not self._pending.done():
                return IndexState.BUILDING
            return IndexState.EMPTY if self._snapshot.is_empty else IndexState.READY

    @property
    def snapshot(self) -> IndexSnapshot:
        """The current consistent snapshot (possibly empty)."""
        with self._lock:
            return self._snapshot

    @property
    def token_count(self) -> int:
        return self.snapshot.token_count

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: Listener) -> None:
        """Call ``listener(snapshot)`` after every successful rebuild."""
        self._listeners.append(listener)

    # ── Refresh ─────────────────────────────────────────────────────

    def _is_stale(self, max_age: float | None) -> bool:
        if max_age is None:
            max_age = self.config.max_age_seconds
        if self._built_generation != self._generation:
            return True
        return self._snapshot.age(self._clock()) > max_age

    def is_stale(self, max_age: float | None = None) -> bool:
        with self._lock:
            return self._is_stale(max_age)

    def invalidate(self) -> None:
        """Mark the current snapshot stale so the next refresh rebuilds it.

        The snapshot itself stays in place and keeps serving queries until
        the rebuild completes.
        """
        with self._lock:
            self._generation += 1

    def request_refresh(self, max_age: float | None = None) -> Future:
        """Start a rebuild if the snapshot is stale, without waiting for it.

        Args:
            max_age: Staleness window in seconds. Defaults to the config value.

        Returns:
            A future resolving to the snapshot to query: the in-flight
            build's future if one is running, an already-completed future
            if the current snapshot is fresh, or a newly started build.

        Raises:
            IndexClosedError: the index has been closed.
        """
        with self._lock:
            if self._closed:
                raise IndexClosedError("Search index is closed")
            if self._pending is not None and not self._pending.done():
                return self._pending
            if not self._is_stale(max_age):
                done: Future = Future()
                done.set_result(self._snapshot)
                return done
            self._pending = self._executor.submit(self._rebuild, self._generation)
            return self._pending

    def refresh_if_stale(self, max_age: float | None = None, timeout: float | None = None) -> IndexSnapshot:
        """Blocking variant of ``request_refresh``.

        Raises:
            IndexClosedError: the index has been closed.
            concurrent.futures.TimeoutError: the rebuild outlasted ``timeout``.
        """
        return self.request_refresh(max_age).result(timeout)

    def _rebuild(self, generation: int) -> IndexSnapshot:
        started = self._clock()
        try:
            snapshot = build_snapshot(self.store.list_all(), clock=self._clock, should_stop=self._cancel.is_set)
        except _BuildCancelled:
            logger.info("Index rebuild abandoned: index closed")
            return self.snapshot
        except Exception as e:
            logger.error(f"Index rebuild failed, keeping previous snapshot: {e}")
            return self.snapshot
        with self._lock:
            if self._cancel.is_set():
                logger.info("Index rebuild finished after close; discarding result")
                return self._snapshot
            self._snapshot = snapshot
            self._built_generation = generation
            self.build_count += 1

        logger.info(
            f"Indexed {snapshot.entry_count} entries, {snapshot.token_count} tokens "
            f"in {snapshot.built_at - started:.3f}s"
        )
        self._notify(snapshot)
        return snapshot

    def _notify(self, snapshot: IndexSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Index listener {listener!r} failed: {e}")

    # ── Query ───────────────────────────────────────────────────────

    def _resolve_snapshot(self) -> IndexSnapshot:
        """Refresh if needed and return the snapshot a query should use.

        Waits up to ``build_timeout`` for a rebuild; past that, or once the
        index is closed, the previous consistent snapshot is served.
        """
        try:
            future = self.request_refresh()
        except IndexClosedError:
            return self.snapshot
        try:
            return future.result(timeout=self.config.build_timeout)
        except FutureTimeoutError:
            logger.warning(
                f"Index rebuild still running after {self.config.build_timeout}s; serving previous snapshot"
            )
        except CancelledError:
            logger.debug("Index rebuild cancelled; serving previous snapshot")
        return self.snapshot

    def search(self, query: str) -> list[SearchResult]:
        """Find entries matching ``query``.

        Blank or non-string queries return an empty list without touching
        the index.

        Returns:
            Results ascending by date, each carrying the full entry text
            and the query exactly as given.
        """
        if not isinstance(query, str) or not query.strip():
            return []
        return match_snapshot(self._resolve_snapshot(), query)

    async def asearch(self, query: str) -> list[SearchResult]:
        """Like ``search``, but awaits a running rebuild instead of blocking the loop."""
        if not isinstance(query, str) or not query.strip():
            return []
        snapshot = self.snapshot
        try:
            future = self.request_refresh()
        except IndexClosedError:
            future = None
        if future is not None:
            try:
                snapshot = await asyncio.wait_for(
                    asyncio.shield(asyncio.wrap_future(future)),
                    timeout=self.config.build_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(
                    f"Index rebuild still running after {self.config.build_timeout}s; serving previous snapshot"
                )
                snapshot = self.snapshot
            except asyncio.CancelledError:
                if not future.cancelled():
                    raise
                snapshot = self.snapshot
        return match_snapshot(snapshot, query)

    # ── Shutdown ────────────────────────────────────────────────────

    def close(self) -> None:
        """Abandon any in-flight rebuild and stop the worker.

        The last consistent snapshot is kept; ``search`` keeps serving it.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._cancel.set()
            pending = self._pending
        if pending is not None:
            pending.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> SearchIndex:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
