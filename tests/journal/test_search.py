"""Tests for goodvibes.journal.search (inverted-index SearchIndex)."""

import os
import threading
from datetime import date

import pytest

from goodvibes.core.exceptions import IndexClosedError
from goodvibes.journal.config import SearchConfig, StoreConfig
from goodvibes.journal.file_store import FileEntryStore
from goodvibes.journal.highlight import highlight_spans
from goodvibes.journal.models import Entry, IndexState
from goodvibes.journal.search import SearchIndex, build_snapshot, match_snapshot

JAN1 = date(2024, 1, 1)
JAN2 = date(2024, 1, 2)
JAN3 = date(2024, 1, 3)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class BlockingStore:
    """Store whose scan waits for ``release`` so tests can observe BUILDING."""

    def __init__(self, entries):
        self.entries = dict(entries)
        self.scans = 0
        self.started = threading.Event()
        self.release = threading.Event()

    def load(self, day):
        return self.entries.get(day, "")

    def save(self, day, text):
        self.entries[day] = text

    def list_all(self):
        self.scans += 1
        self.started.set()
        assert self.release.wait(5)
        for day, text in list(self.entries.items()):
            yield Entry(date=day, text=text)


class FailingStore:
    scans = 0

    def load(self, day):
        return ""

    def save(self, day, text):
        pass

    def list_all(self):
        self.scans += 1
        raise OSError("entries directory unreadable")


@pytest.fixture
def index(memory_store):
    idx = SearchIndex(memory_store, clock=FakeClock())
    yield idx
    idx.close()


def dates(results):
    return [str(r) for r in results]


# ── Snapshot building and matching ──────────────────────────────────


class TestBuildSnapshot:
    def test_word_index(self):
        snapshot = build_snapshot(
            [Entry(JAN1, "Hello, world!"), Entry(JAN2, "goodbye world")],
            clock=lambda: 5.0,
        )
        assert snapshot.words["hello"] == frozenset({JAN1})
        assert snapshot.words["world"] == frozenset({JAN1, JAN2})
        assert snapshot.contents[JAN1] == "Hello, world!"
        assert snapshot.built_at == 5.0

    def test_every_token_occurs_in_its_entries(self):
        entries = [
            Entry(JAN1, "The Quick, brown fox.\nJumps!"),
            Entry(JAN2, "over\tthe LAZY dog?"),
            Entry(JAN3, "Große Straße, ﬁne day"),
        ]
        snapshot = build_snapshot(entries)
        for token, days in snapshot.words.items():
            for day in days:
                assert highlight_spans(snapshot.contents[day], token)

    def test_empty_entry_has_no_tokens(self):
        snapshot = build_snapshot([Entry(JAN1, "")])
        assert snapshot.token_count == 0
        assert snapshot.entry_count == 1


class TestMatchSnapshot:
    @pytest.fixture
    def snapshot(self):
        return build_snapshot([Entry(JAN1, "testing things"), Entry(JAN2, "Rest day")])

    def test_exact_token(self, snapshot):
        assert dates(match_snapshot(snapshot, "things")) == ["2024-01-01"]

    def test_query_inside_token(self, snapshot):
        assert dates(match_snapshot(snapshot, "test")) == ["2024-01-01"]

    def test_token_inside_query(self, snapshot):
        # "testing123" is not indexed, but it contains the token "testing"
        assert dates(match_snapshot(snapshot, "testing123")) == ["2024-01-01"]

    def test_substring_matches_both(self, snapshot):
        assert dates(match_snapshot(snapshot, "est")) == ["2024-01-01", "2024-01-02"]

    def test_no_match(self, snapshot):
        assert match_snapshot(snapshot, "zebra") == []

    def test_results_keep_original_query(self, snapshot):
        [result] = match_snapshot(snapshot, "REST")
        assert result.query == "REST"
        assert result.text == "Rest day"

    def test_non_ascii_query_matches_and_highlights(self):
        snapshot = build_snapshot([Entry(JAN1, "Walked down the Straße")])
        [result] = match_snapshot(snapshot, "STRAßE")
        assert highlight_spans(result.text, result.query) == [(16, 6)]
        assert match_snapshot(snapshot, "strasse") == []


# ── SearchIndex ─────────────────────────────────────────────────────


class TestSearch:
    def test_world_matches_both_in_date_order(self, index):
        assert dates(index.search("world")) == ["2024-01-01", "2024-01-02"]

    def test_hello_matches_one(self, index):
        results = index.search("hello")
        assert dates(results) == ["2024-01-01"]
        assert results[0].text == "hello world"
        assert results[0].date == JAN1

    def test_case_insensitive(self, index):
        results = index.search("WORLD")
        assert dates(results) == ["2024-01-01", "2024-01-02"]
        assert all(r.query == "WORLD" for r in results)

    def test_results_are_deduplicated(self, make_store):
        store = make_store({JAN1: "walk walking walked"})
        with SearchIndex(store) as idx:
            assert dates(idx.search("walk")) == ["2024-01-01"]

    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None])
    def test_blank_query_returns_empty(self, index, memory_store, query):
        assert index.search(query) == []
        assert memory_store.scans == 0
        assert index.state is IndexState.EMPTY

    def test_empty_corpus(self, make_store):
        with SearchIndex(make_store()) as idx:
            assert idx.search("anything") == []
            assert idx.state is IndexState.READY

    def test_corrupt_file_does_not_affect_others(self, tmp_dir):
        entries_dir = os.path.join(tmp_dir, "entries")
        store = FileEntryStore(StoreConfig(entries_dir=entries_dir))
        store.save(JAN1, "hello world")
        store.save(JAN3, "another world")
        with open(os.path.join(entries_dir, "2024-01-02.json"), "w") as f:
            f.write('{"Text": "goodbye world"')  # truncated

        with SearchIndex(store) as idx:
            assert dates(idx.search("world")) == ["2024-01-01", "2024-01-03"]
            assert idx.snapshot.entry_count == 2

    def test_failed_scan_keeps_serving(self):
        store = FailingStore()
        with SearchIndex(store) as idx:
            assert idx.search("hello") == []
            assert idx.state is IndexState.EMPTY
            assert idx.build_count == 0


class TestRefresh:
    def test_starts_empty(self, index):
        assert index.state is IndexState.EMPTY
        assert index.snapshot.is_empty

    def test_refresh_builds_once_within_window(self, index, memory_store):
        first = index.refresh_if_stale()
        second = index.refresh_if_stale()
        assert memory_store.scans == 1
        assert second is first
        assert index.build_count == 1
        assert index.state is IndexState.READY

    def test_repeated_searches_give_identical_results(self, index, memory_store):
        index.refresh_if_stale()
        before = index.search("world")
        index.refresh_if_stale()
        assert index.search("world") == before
        assert memory_store.scans == 1

    def test_rebuilds_after_window(self, memory_store):
        clock = FakeClock()
        with SearchIndex(memory_store, SearchConfig(max_age_seconds=300), clock=clock) as idx:
            idx.refresh_if_stale()
            clock.now += 300
            idx.refresh_if_stale()
            assert memory_store.scans == 1
            clock.now += 1
            idx.refresh_if_stale()
            assert memory_store.scans == 2

    def test_explicit_max_age(self, index, memory_store):
        index.refresh_if_stale()
        index.refresh_if_stale(max_age=0)
        assert memory_store.scans == 1  # age 0 is not older than 0
        index._clock.now += 0.5
        index.refresh_if_stale(max_age=0)
        assert memory_store.scans == 2

    def test_new_entries_invisible_until_refresh(self, index, memory_store):
        index.refresh_if_stale()
        memory_store.entries[JAN3] = "hello again"
        assert dates(index.search("hello")) == ["2024-01-01"]

    def test_invalidate_forces_rebuild(self, index, memory_store):
        index.refresh_if_stale()
        memory_store.entries[JAN3] = "hello again"
        index.invalidate()
        assert index.is_stale()
        assert dates(index.search("hello")) == ["2024-01-01", "2024-01-03"]
        assert memory_store.scans == 2

    def test_rebuild_replaces_snapshot(self, index, memory_store):
        old = index.refresh_if_stale()
        del memory_store.entries[JAN1]
        index.invalidate()
        new = index.refresh_if_stale()
        assert new is not old
        assert JAN1 in old.contents
        assert JAN1 not in new.contents
        assert index.search("hello") == []

    def test_listeners_notified(self, index):
        seen = []
        index.add_listener(seen.append)
        snapshot = index.refresh_if_stale()
        assert seen == [snapshot]

    def test_failing_listener_is_contained(self, index):
        def boom(snapshot):
            raise RuntimeError("listener bug")

        index.add_listener(boom)
        assert dates(index.search("hello")) == ["2024-01-01"]


class TestConcurrency:
    def test_refresh_during_build_reuses_inflight_build(self):
        store = BlockingStore({JAN1: "hello world"})
        idx = SearchIndex(store)
        try:
            first = idx.request_refresh()
            assert store.started.wait(5)
            assert idx.state is IndexState.BUILDING
            assert idx.request_refresh() is first
            store.release.set()
            snapshot = first.result(timeout=5)
            assert store.scans == 1
            assert snapshot.contents == {JAN1: "hello world"}
            assert idx.state is IndexState.READY
        finally:
            store.release.set()
            idx.close()

    def test_search_during_slow_build_serves_previous_snapshot(self):
        store = BlockingStore({JAN1: "hello world"})
        store.release.set()
        idx = SearchIndex(store, SearchConfig(build_timeout=0.05))
        try:
            assert dates(idx.search("hello")) == ["2024-01-01"]

            store.release.clear()
            store.entries[JAN2] = "hello again"
            idx.invalidate()
            assert dates(idx.search("hello")) == ["2024-01-01"]
            assert idx.state is IndexState.BUILDING

            store.release.set()
            idx.refresh_if_stale(timeout=5)
            assert dates(idx.search("hello")) == ["2024-01-01", "2024-01-02"]
        finally:
            store.release.set()
            idx.close()

    def test_close_abandons_build_and_keeps_snapshot(self):
        store = BlockingStore({JAN1: "hello world"})
        store.release.set()
        idx = SearchIndex(store)
        old = idx.refresh_if_stale(timeout=5)

        store.release.clear()
        store.started.clear()
        store.entries[JAN2] = "hello again"
        idx.invalidate()
        future = idx.request_refresh()
        assert store.started.wait(5)

        idx.close()
        store.release.set()
        assert future.result(timeout=5) is old
        assert idx.snapshot is old
        assert idx.build_count == 1
        assert idx.closed

        with pytest.raises(IndexClosedError):
            idx.request_refresh()
        assert dates(idx.search("hello")) == ["2024-01-01"]

    def test_close_is_idempotent(self, index):
        index.close()
        index.close()
        assert index.closed


@pytest.mark.asyncio
async def test_asearch(index, memory_store):
    results = await index.asearch("world")
    assert dates(results) == ["2024-01-01", "2024-01-02"]
    assert await index.asearch("  ") == []
    assert memory_store.scans == 1


@pytest.mark.asyncio
async def test_asearch_after_close_serves_last_snapshot(index):
    await index.asearch("hello")
    index.close()
    assert dates(await index.asearch("hello")) == ["2024-01-01"]
