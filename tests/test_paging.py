"""Tests for the paging engine.

Covers the single-access transition (hits, free-frame loads and victim
selection for FIFO, LRU and Optimal), bulk replay, step-by-step sessions and
the classic properties every replacement simulator must satisfy.
"""

import random

import pytest

from errors import ExhaustedError, InvalidConfiguration
from paging import (
    FrameTable,
    OutcomeKind,
    PagingSession,
    ReplacementPolicy,
    compare_policies,
    describe,
    fault_curve,
    process_access,
    reset_paging,
    run_paging,
    step_paging,
)

TEXTBOOK = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2, 1, 2, 0, 1, 7, 0, 1]
BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
ALL_POLICIES = list(ReplacementPolicy)


def random_references(count=25, length=30, pages=6, seed=1234):
    rng = random.Random(seed)
    return [[rng.randint(0, pages - 1) for _ in range(length)] for _ in range(count)]


def replay_steps(session):
    outcomes = []
    while True:
        try:
            outcome, counts = step_paging(session)
        except ExhaustedError:
            return outcomes
        outcomes.append(outcome)


# -- Policy parsing -----------------------------------------------------------


class TestReplacementPolicy:
    """Verify policy names resolve to enum members."""

    @pytest.mark.parametrize("raw, expected", [
        ("FIFO", ReplacementPolicy.FIFO),
        ("lru", ReplacementPolicy.LRU),
        ("OPT", ReplacementPolicy.OPTIMAL),
        ("optimal", ReplacementPolicy.OPTIMAL),
        (ReplacementPolicy.LRU, ReplacementPolicy.LRU),
    ])
    def test_parse(self, raw, expected) -> None:
        assert ReplacementPolicy.parse(raw) is expected

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            ReplacementPolicy.parse("CLOCK")


# -- Single access ------------------------------------------------------------


class TestProcessAccess:
    """Verify the transition applied to one access."""

    def test_first_access_faults_into_lowest_free_frame(self) -> None:
        table = FrameTable(3)
        frames, outcome = process_access(table, ReplacementPolicy.FIFO, 5, 0)
        assert frames == (5, None, None)
        assert outcome.kind is OutcomeKind.FAULT
        assert outcome.frame_index == 0
        assert outcome.victim is None

    def test_resident_page_is_a_hit(self) -> None:
        table = FrameTable(2)
        process_access(table, ReplacementPolicy.LRU, "A", 0)
        process_access(table, ReplacementPolicy.LRU, "B", 1)
        frames, outcome = process_access(table, ReplacementPolicy.LRU, "A", 2)
        assert outcome.is_hit
        assert outcome.frame_index == 0
        assert frames == ("A", "B")
        assert table.recency["A"] == 2

    def test_recency_updated_on_fault(self) -> None:
        table = FrameTable(1)
        process_access(table, ReplacementPolicy.LRU, 1, 4)
        assert table.recency[1] == 4

    def test_fifo_evicts_oldest_loaded(self) -> None:
        table = FrameTable(3)
        for t, page in enumerate([1, 2, 3]):
            process_access(table, ReplacementPolicy.FIFO, page, t)
        # re-accessing 1 does not change FIFO order
        process_access(table, ReplacementPolicy.FIFO, 1, 3)
        frames, outcome = process_access(table, ReplacementPolicy.FIFO, 4, 4)
        assert outcome.victim == 1
        assert outcome.frame_index == 0
        assert frames == (4, 2, 3)
        assert list(table.load_order) == [2, 3, 4]

    def test_fifo_queue_order_is_independent_of_slots(self) -> None:
        table = FrameTable(2)
        for t, page in enumerate([1, 2, 3, 4]):
            frames, outcome = process_access(table, ReplacementPolicy.FIFO, page, t)
        assert frames == (3, 4)
        assert outcome.victim == 2
        assert table.slot_of(table.load_order[0]) == 0

    def test_lru_evicts_least_recently_used(self) -> None:
        table = FrameTable(3)
        for t, page in enumerate([1, 2, 3, 1]):
            process_access(table, ReplacementPolicy.LRU, page, t)
        frames, outcome = process_access(table, ReplacementPolicy.LRU, 4, 4)
        assert outcome.victim == 2
        assert frames == (1, 4, 3)

    def test_optimal_evicts_farthest_next_use(self) -> None:
        reference = [1, 2, 3, 4, 3, 2, 1]
        table = FrameTable(3)
        for t, page in enumerate(reference[:3]):
            process_access(table, ReplacementPolicy.OPTIMAL, page, t, reference[t + 1:])
        frames, outcome = process_access(table, ReplacementPolicy.OPTIMAL, 4, 3, reference[4:])
        assert outcome.victim == 1
        assert frames == (4, 2, 3)

    def test_optimal_prefers_page_never_used_again(self) -> None:
        table = FrameTable(3)
        for t, page in enumerate([1, 2, 3]):
            process_access(table, ReplacementPolicy.OPTIMAL, page, t)
        frames, outcome = process_access(table, ReplacementPolicy.OPTIMAL, 4, 3, [1, 2])
        assert outcome.victim == 3
        assert frames == (1, 2, 4)

    def test_optimal_ties_go_to_lowest_frame(self) -> None:
        table = FrameTable(3)
        for t, page in enumerate([1, 2, 3]):
            process_access(table, ReplacementPolicy.OPTIMAL, page, t)
        # none of the residents is referenced again
        _, outcome = process_access(table, ReplacementPolicy.OPTIMAL, 4, 3, [4, 4])
        assert outcome.victim == 1
        assert outcome.frame_index == 0


# -- Bulk mode ----------------------------------------------------------------


class TestRunPaging:
    """Verify replaying a whole reference string."""

    def test_textbook_counts(self) -> None:
        assert run_paging(TEXTBOOK, 3, "FIFO").counts.faults == 15
        assert run_paging(TEXTBOOK, 3, "LRU").counts.faults == 12
        assert run_paging(TEXTBOOK, 3, "OPT").counts.faults == 9

    def test_belady_anomaly(self) -> None:
        """FIFO faults more with 4 frames than with 3 on this string."""
        assert run_paging(BELADY, 3, ReplacementPolicy.FIFO).counts.faults == 9
        assert run_paging(BELADY, 4, ReplacementPolicy.FIFO).counts.faults == 10
        assert fault_curve(BELADY, "FIFO", [3, 4]) == {3: 9, 4: 10}

    def test_one_outcome_per_access_in_order(self) -> None:
        run = run_paging(TEXTBOOK, 3, "LRU")
        assert [o.page for o in run.outcomes] == TEXTBOOK
        assert [o.time for o in run.outcomes] == list(range(len(TEXTBOOK)))

    def test_empty_reference_has_zero_counts(self) -> None:
        run = run_paging([], 3, "FIFO")
        assert run.outcomes == []
        assert run.counts.faults == 0
        assert run.counts.hits == 0
        assert run.final_frames == (None, None, None)

    def test_symbolic_pages(self) -> None:
        run = run_paging(["A", "B", "A", "C"], 2, "LRU")
        assert [o.kind for o in run.outcomes] == [
            OutcomeKind.FAULT, OutcomeKind.FAULT, OutcomeKind.HIT, OutcomeKind.FAULT,
        ]
        assert run.final_frames == ("A", "C")

    @pytest.mark.parametrize("frame_count", [0, -1, 2.5, True, "3"])
    def test_invalid_frame_count_rejected(self, frame_count) -> None:
        with pytest.raises(InvalidConfiguration):
            run_paging([1, 2, 3], frame_count, "FIFO")

    def test_event_log(self) -> None:
        run = run_paging([1, 2, 1, 3], 2, "FIFO")
        assert run.event_log == [
            "Fault: Page 1 not in memory",
            "Loaded: Page 1 -> Frame 0",
            "Fault: Page 2 not in memory",
            "Loaded: Page 2 -> Frame 1",
            "Hit: Page 1 in Frame 0",
            "Fault: Page 3 not in memory",
            "Evicting: Page 1 from Frame 0",
            "Loaded: Page 3 -> Frame 0 (replaced)",
        ]

    def test_describe_matches_event_log(self) -> None:
        run = run_paging([1, 1], 1, "LRU")
        assert describe(run.outcomes[1]) == ["Hit: Page 1 in Frame 0"]

    def test_stats(self) -> None:
        counts = run_paging([1, 2, 1, 2], 2, "LRU").counts
        assert counts.as_dict() == {
            "hits": 2, "faults": 2, "hit_ratio": 0.5, "fault_rate": 0.5, "total_refs": 4,
        }

    def test_compare_policies(self) -> None:
        results = compare_policies(TEXTBOOK, 3)
        assert {p: c.faults for p, c in results.items()} == {
            ReplacementPolicy.FIFO: 15,
            ReplacementPolicy.LRU: 12,
            ReplacementPolicy.OPTIMAL: 9,
        }


# -- Invariants ---------------------------------------------------------------


class TestInvariants:
    """Verify properties that hold for every input."""

    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_hits_plus_faults_equals_length(self, policy) -> None:
        for reference in random_references():
            for frames in (1, 2, 3, 5):
                counts = run_paging(reference, frames, policy).counts
                assert counts.hits + counts.faults == len(reference)

    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_frames_never_hold_duplicates(self, policy) -> None:
        for reference in random_references(count=10):
            for outcome in run_paging(reference, 3, policy).outcomes:
                resident = [p for p in outcome.frames if p is not None]
                assert len(resident) == len(set(resident))
                assert len(outcome.frames) == 3
                assert outcome.frames[outcome.frame_index] == outcome.page

    def test_policies_agree_without_repeats(self) -> None:
        reference = list(range(12))
        runs = [run_paging(reference, 4, p) for p in ALL_POLICIES]
        for run in runs:
            assert run.counts.faults == len(reference)
            assert run.counts.hits == 0
            assert all(o.is_fault for o in run.outcomes)

    def test_optimal_never_worse(self) -> None:
        for reference in random_references(count=40, pages=8, seed=99):
            for frames in (1, 2, 3, 4):
                opt = run_paging(reference, frames, "OPT").counts.faults
                assert opt <= run_paging(reference, frames, "LRU").counts.faults
                assert opt <= run_paging(reference, frames, "FIFO").counts.faults


# -- Incremental mode ---------------------------------------------------------


class TestPagingSession:
    """Verify step-by-step replay."""

    @pytest.mark.parametrize("policy", ALL_POLICIES)
    def test_steps_match_bulk_run(self, policy) -> None:
        for reference in [TEXTBOOK, BELADY] + random_references(count=5):
            bulk = run_paging(reference, 3, policy)
            session = PagingSession(reference, 3, policy)
            assert replay_steps(session) == bulk.outcomes
            assert session.counts == bulk.counts
            assert session.event_log == bulk.event_log

    def test_step_advances_cursor_by_one(self) -> None:
        session = PagingSession([1, 2, 1], 2, "FIFO")
        outcome, counts = session.step()
        assert session.cursor == 1
        assert session.remaining == 2
        assert outcome.page == 1
        assert (counts.faults, counts.hits) == (1, 0)

    def test_returned_counts_are_snapshots(self) -> None:
        session = PagingSession([1, 2], 2, "FIFO")
        _, first = session.step()
        session.step()
        assert first.faults == 1

    def test_exhausted_session_refuses_repeatedly(self) -> None:
        session = PagingSession([1, 1], 1, "LRU")
        replay_steps(session)
        assert session.finished
        for _ in range(3):
            with pytest.raises(ExhaustedError) as info:
                session.step()
            assert info.value.counts.hits == 1
            assert info.value.counts.faults == 1
        assert session.counts.total == 2
        assert session.cursor == 2

    def test_empty_reference_is_exhausted_immediately(self) -> None:
        session = PagingSession([], 3, "OPT")
        with pytest.raises(ExhaustedError):
            step_paging(session)

    def test_reset_discards_progress(self) -> None:
        session = PagingSession(BELADY, 3, "FIFO")
        for _ in range(5):
            session.step()
        reset_paging(session)
        reset_paging(session)
        assert session.cursor == 0
        assert session.counts.total == 0
        assert session.frames == (None, None, None)
        assert session.event_log == []
        assert replay_steps(session) == run_paging(BELADY, 3, "FIFO").outcomes

    def test_reset_without_session_is_noop(self) -> None:
        reset_paging(None)

    def test_sessions_are_independent(self) -> None:
        a = PagingSession(BELADY, 3, "FIFO")
        b = PagingSession(BELADY, 3, "FIFO")
        a.step()
        a.step()
        assert b.cursor == 0
        assert b.frames == (None, None, None)

    def test_load_order_tracks_fifo_queue(self) -> None:
        session = PagingSession([1, 2, 3], 2, "FIFO")
        replay_steps(session)
        assert session.load_order == [2, 3]

    def test_invalid_frame_count_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            PagingSession([1, 2], 0, "FIFO")
