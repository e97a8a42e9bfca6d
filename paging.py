"""
Paging Engine — page replacement under a fixed frame budget.

Replays a page reference string access by access, classifying every access
as a hit or a fault and, when all frames are occupied, choosing a victim
with one of the classic replacement policies:
    - FIFO:    evict the page that was loaded earliest
    - LRU:     evict the page that was accessed least recently
    - Optimal: evict the page whose next use lies farthest in the future

The same transition function (process_access) drives both modes:
    - bulk mode        -> run_paging() replays the whole string at once
    - incremental mode -> PagingSession.step() advances one access per call
"""

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Deque, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from errors import ExhaustedError, InvalidConfiguration

# A page is any hashable token: 7, "A", ...
PageId = Hashable


# =============================================================================
# POLICIES AND RESULT TYPES
# =============================================================================

class ReplacementPolicy(Enum):
    """
    Enumeration of available page replacement algorithms.

    FIFO:    First-In-First-Out - replaces the oldest loaded page
    LRU:     Least Recently Used - replaces the page not used for longest time
    OPTIMAL: Belady's optimal - replaces the page used farthest in the future
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "OPT"

    @classmethod
    def parse(cls, value) -> "ReplacementPolicy":
        """
        Resolve a policy from a member, a name or a value (case-insensitive).

        Raises:
            InvalidConfiguration: If the policy is not one of FIFO, LRU, OPT
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        for policy in cls:
            if key in (policy.name, policy.value):
                return policy
        raise InvalidConfiguration(f"Unknown replacement policy: {value!r}")


class OutcomeKind(Enum):
    HIT = "Hit"
    FAULT = "Fault"


@dataclass(frozen=True)
class StepOutcome:
    """
    Result of processing a single page access.

    Attributes:
        page (PageId): The page that was referenced
        time (int): Logical time of the access (index in the reference string)
        kind (OutcomeKind): HIT or FAULT
        frame_index (int): Frame that holds the page after the access
        victim (Optional[PageId]): Evicted page, None when nothing was evicted
        frames (Tuple): Snapshot of every frame after the access (None = free)
    """
    page: PageId
    time: int
    kind: OutcomeKind
    frame_index: int
    victim: Optional[PageId] = None
    frames: Tuple[Optional[PageId], ...] = ()

    @property
    def is_hit(self) -> bool:
        return self.kind is OutcomeKind.HIT

    @property
    def is_fault(self) -> bool:
        return self.kind is OutcomeKind.FAULT


@dataclass
class PagingCounts:
    """Running tally of hits and faults."""
    faults: int = 0
    hits: int = 0

    def record(self, kind: OutcomeKind):
        if kind is OutcomeKind.HIT:
            self.hits += 1
        else:
            self.faults += 1

    def snapshot(self) -> "PagingCounts":
        return replace(self)

    @property
    def total(self) -> int:
        return self.hits + self.faults

    @property
    def hit_ratio(self) -> float:
        return round(self.hits / self.total, 4) if self.total > 0 else 0.0

    @property
    def fault_rate(self) -> float:
        return round(self.faults / self.total, 4) if self.total > 0 else 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "hits": self.hits,
            "faults": self.faults,
            "hit_ratio": self.hit_ratio,
            "fault_rate": self.fault_rate,
            "total_refs": self.total,
        }


# =============================================================================
# FRAME TABLE
# =============================================================================

def validate_frame_count(frame_count) -> int:
    """
    Reject frame counts that cannot host a simulation.

    Raises:
        InvalidConfiguration: If frame_count is not an integer >= 1
    """
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise InvalidConfiguration(f"Frame count must be an integer, got {frame_count!r}")
    if frame_count < 1:
        raise InvalidConfiguration(f"Frame count must be at least 1, got {frame_count}")
    return frame_count


class FrameTable:
    """
    Physical frames plus the bookkeeping the replacement policies need.

    Attributes:
        slots (List[Optional[PageId]]): Fixed-length frame set, None = free
        recency (Dict[PageId, int]): Last logical time each page was accessed
        load_order (Deque[PageId]): Resident pages in load order, oldest first.
            Independent of slot positions; slot_of() maps a page to its frame.
    """

    def __init__(self, frame_count: int):
        validate_frame_count(frame_count)
        self.slots: List[Optional[PageId]] = [None] * frame_count
        self.recency: Dict[PageId, int] = {}
        self.load_order: Deque[PageId] = deque()

    def __len__(self) -> int:
        return len(self.slots)

    def slot_of(self, page: PageId) -> Optional[int]:
        """Return the frame holding page, or None if it is not resident."""
        for i, resident in enumerate(self.slots):
            if resident is not None and resident == page:
                return i
        return None

    def free_slot(self) -> Optional[int]:
        """Return the lowest free frame index, or None when memory is full."""
        for i, resident in enumerate(self.slots):
            if resident is None:
                return i
        return None

    def snapshot(self) -> Tuple[Optional[PageId], ...]:
        return tuple(self.slots)


# =============================================================================
# TRANSITION FUNCTION
# =============================================================================

def process_access(
    table: FrameTable,
    policy: ReplacementPolicy,
    page: PageId,
    time: int,
    future: Sequence[PageId] = (),
) -> Tuple[Tuple[Optional[PageId], ...], StepOutcome]:
    """
    Process one page access against the frame table.

    1. Page resident      -> HIT, refresh its recency, no frame changes
    2. Page not resident  -> FAULT:
        a. load into the lowest free frame if one exists
        b. otherwise evict a victim chosen by policy and reuse its frame
    3. The page's recency is set to time on every path

    Args:
        table (FrameTable): Frames, recency index and load order (updated in place)
        policy (ReplacementPolicy): Victim selection rule
        page (PageId): Page being referenced
        time (int): Logical time of this access
        future (Sequence[PageId]): References after time; only OPTIMAL reads it

    Returns:
        Tuple: (frames after the access, StepOutcome)
    """
    # ----- PAGE HIT -----
    slot = table.slot_of(page)
    if slot is not None:
        table.recency[page] = time
        frames = table.snapshot()
        return frames, StepOutcome(page, time, OutcomeKind.HIT, slot, None, frames)

    # ----- PAGE FAULT -----
    victim = None
    slot = table.free_slot()
    if slot is None:
        slot = _select_victim(table, policy, future)
        victim = table.slots[slot]
        table.load_order.remove(victim)

    table.slots[slot] = page
    table.load_order.append(page)
    table.recency[page] = time

    frames = table.snapshot()
    return frames, StepOutcome(page, time, OutcomeKind.FAULT, slot, victim, frames)


def _select_victim(table: FrameTable, policy: ReplacementPolicy, future: Sequence[PageId]) -> int:
    """Pick the frame to evict. Ties go to the lowest frame index."""
    if policy is ReplacementPolicy.FIFO:
        # Head of the load queue is the oldest resident
        return table.slot_of(table.load_order[0])

    if policy is ReplacementPolicy.LRU:
        victim_slot = 0
        oldest = None
        for i, resident in enumerate(table.slots):
            last_used = table.recency.get(resident, -1)
            if oldest is None or last_used < oldest:
                oldest = last_used
                victim_slot = i
        return victim_slot

    if policy is ReplacementPolicy.OPTIMAL:
        future = list(future)
        victim_slot = 0
        farthest = -1
        for i, resident in enumerate(table.slots):
            try:
                distance = future.index(resident)
            except ValueError:
                # Never used again
                return i
            if distance > farthest:
                farthest = distance
                victim_slot = i
        return victim_slot

    raise InvalidConfiguration(f"Unsupported replacement policy: {policy!r}")


def describe(outcome: StepOutcome) -> List[str]:
    """Render an outcome as event-log lines."""
    if outcome.is_hit:
        return [f"Hit: Page {outcome.page} in Frame {outcome.frame_index}"]

    lines = [f"Fault: Page {outcome.page} not in memory"]
    if outcome.victim is not None:
        lines.append(f"Evicting: Page {outcome.victim} from Frame {outcome.frame_index}")
        lines.append(f"Loaded: Page {outcome.page} -> Frame {outcome.frame_index} (replaced)")
    else:
        lines.append(f"Loaded: Page {outcome.page} -> Frame {outcome.frame_index}")
    return lines


# =============================================================================
# BULK MODE
# =============================================================================

@dataclass
class PagingRun:
    """
    Outcomes and counts of a replay.

    Attributes:
        reference (Tuple[PageId, ...]): The reference string replayed
        frame_count (int): Number of frames
        policy (ReplacementPolicy): Replacement policy used
        outcomes (List[StepOutcome]): One outcome per processed access, in order
        counts (PagingCounts): Cumulative hits and faults
        event_log (List[str]): Readable log of every event
    """
    reference: Tuple[PageId, ...]
    frame_count: int
    policy: ReplacementPolicy
    outcomes: List[StepOutcome] = field(default_factory=list)
    counts: PagingCounts = field(default_factory=PagingCounts)
    event_log: List[str] = field(default_factory=list)

    def record(self, outcome: StepOutcome):
        self.outcomes.append(outcome)
        self.counts.record(outcome.kind)
        self.event_log.extend(describe(outcome))

    @property
    def final_frames(self) -> Tuple[Optional[PageId], ...]:
        if self.outcomes:
            return self.outcomes[-1].frames
        return (None,) * self.frame_count


def _future(reference: Tuple[PageId, ...], time: int, policy: ReplacementPolicy) -> Sequence[PageId]:
    if policy is ReplacementPolicy.OPTIMAL:
        return reference[time + 1:]
    return ()


def run_paging(reference: Iterable[PageId], frame_count: int, policy) -> PagingRun:
    """
    Replay an entire reference string and collect every outcome.

    Args:
        reference (Iterable[PageId]): Pages in access order
        frame_count (int): Number of physical frames (>= 1)
        policy: ReplacementPolicy member or its name

    Returns:
        PagingRun: outcomes in input order plus the final counts

    Raises:
        InvalidConfiguration: On a bad frame count or unknown policy
    """
    policy = ReplacementPolicy.parse(policy)
    table = FrameTable(frame_count)
    reference = tuple(reference)

    run = PagingRun(reference, frame_count, policy)
    for time, page in enumerate(reference):
        _, outcome = process_access(table, policy, page, time, _future(reference, time, policy))
        run.record(outcome)
    return run


def compare_policies(reference: Iterable[PageId], frame_count: int) -> Dict[ReplacementPolicy, PagingCounts]:
    """Run every policy on the same input and return their counts."""
    reference = tuple(reference)
    return {
        policy: run_paging(reference, frame_count, policy).counts
        for policy in ReplacementPolicy
    }


def fault_curve(reference: Iterable[PageId], policy, frame_counts: Iterable[int]) -> Dict[int, int]:
    """
    Count faults for each frame count.

    With FIFO this exposes Belady's anomaly: 1 2 3 4 1 2 5 1 2 3 4 5 faults
    9 times with 3 frames but 10 times with 4.
    """
    reference = tuple(reference)
    return {
        frames: run_paging(reference, frames, policy).counts.faults
        for frames in frame_counts
    }


# =============================================================================
# INCREMENTAL MODE
# =============================================================================

class PagingSession:
    """
    Step-by-step replay owned by a single caller.

    Each session holds its own frame table and cursor, so independent
    simulations never share state. Create one when the first step is
    requested, call step() per access, and reset() to start over.

    Attributes:
        reference (Tuple[PageId, ...]): Reference string being replayed
        frame_count (int): Number of frames
        policy (ReplacementPolicy): Replacement policy
        cursor (int): Index of the next unprocessed access
    """

    def __init__(self, reference: Iterable[PageId], frame_count: int, policy):
        self.policy = ReplacementPolicy.parse(policy)
        self.frame_count = validate_frame_count(frame_count)
        self.reference = tuple(reference)
        self.reset()

    def reset(self):
        """Discard all progress. Safe to call any number of times."""
        self.table = FrameTable(self.frame_count)
        self.cursor = 0
        self._run = PagingRun(self.reference, self.frame_count, self.policy)

    @property
    def finished(self) -> bool:
        return self.cursor >= len(self.reference)

    @property
    def remaining(self) -> int:
        return len(self.reference) - self.cursor

    @property
    def counts(self) -> PagingCounts:
        return self._run.counts.snapshot()

    @property
    def outcomes(self) -> List[StepOutcome]:
        return list(self._run.outcomes)

    @property
    def event_log(self) -> List[str]:
        return self._run.event_log

    @property
    def frames(self) -> Tuple[Optional[PageId], ...]:
        return self.table.snapshot()

    @property
    def load_order(self) -> List[PageId]:
        return list(self.table.load_order)

    def step(self) -> Tuple[StepOutcome, PagingCounts]:
        """
        Process exactly one access.

        Returns:
            Tuple[StepOutcome, PagingCounts]: the outcome and cumulative counts

        Raises:
            ExhaustedError: If every access was already processed
        """
        if self.finished:
            raise ExhaustedError(self.counts)

        time = self.cursor
        page = self.reference[time]
        _, outcome = process_access(
            self.table, self.policy, page, time, _future(self.reference, time, self.policy)
        )
        self.cursor += 1
        self._run.record(outcome)
        return outcome, self.counts


def step_paging(session: PagingSession) -> Tuple[StepOutcome, PagingCounts]:
    return session.step()


def reset_paging(session: Optional[PagingSession]):
    if session is not None:
        session.reset()
