# allocation.py

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from errors import InvalidConfiguration

NO_FIT = None


class FitPolicy(Enum):
    FIRST = "First Fit"
    BEST = "Best Fit"
    WORST = "Worst Fit"

    @classmethod
    def parse(cls, value) -> "FitPolicy":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", " ").replace("_", " ")
        for policy in cls:
            if key in (policy.name, policy.value.upper()):
                return policy
        raise InvalidConfiguration(f"Unknown fit policy: {value!r}")


@dataclass(frozen=True)
class Hole:
    index: int
    size: int

    def __repr__(self):
        return f"[H{self.index}|{self.size}]"


@dataclass(frozen=True)
class AllocationResult:
    request_size: int
    policy: FitPolicy
    selected: Optional[int]
    holes: Tuple[Hole, ...]

    @property
    def allocated(self) -> bool:
        return self.selected is not NO_FIT

    @property
    def no_fit(self) -> bool:
        return self.selected is NO_FIT

    @property
    def selected_hole(self) -> Optional[Hole]:
        return next((h for h in self.holes if h.index == self.selected), None)


# -----------------------------
# Fit decision
# -----------------------------
def fit(holes: Sequence[Hole], request_size: int, policy: FitPolicy) -> AllocationResult:
    """Pick a hole for request_size. Holes are scanned in input order and never modified."""
    holes = tuple(holes)

    if policy is FitPolicy.FIRST:
        selected = _first_fit(holes, request_size)
    elif policy is FitPolicy.BEST:
        selected = _best_fit(holes, request_size)
    elif policy is FitPolicy.WORST:
        selected = _worst_fit(holes, request_size)
    else:
        raise InvalidConfiguration(f"Unsupported fit policy: {policy!r}")

    return AllocationResult(request_size, policy, selected, holes)


# -----------------------------
# Algorithms
# -----------------------------
def _first_fit(holes, req):
    for hole in holes:
        if hole.size >= req:
            return hole.index
    return NO_FIT


def _best_fit(holes, req):
    best_index = NO_FIT
    best_size = float('inf')

    for hole in holes:
        if hole.size >= req and hole.size < best_size:
            best_size = hole.size
            best_index = hole.index

    return best_index


def _worst_fit(holes, req):
    worst_index = NO_FIT
    worst_size = -1

    for hole in holes:
        if hole.size >= req and hole.size > worst_size:
            worst_size = hole.size
            worst_index = hole.index

    return worst_index


# -----------------------------
# Entry point
# -----------------------------
def allocate(sizes: Iterable[int], request_size: int, policy) -> AllocationResult:
    """
    Validate raw hole sizes and a process size, then run one fit decision.

    Raises InvalidConfiguration for an empty hole list, a negative hole size
    or a process size that is not positive. A request that fits nowhere is
    not an error: the result reports no_fit.
    """
    policy = FitPolicy.parse(policy)
    sizes = list(sizes)

    if not sizes:
        raise InvalidConfiguration("Enter available hole sizes.")
    if isinstance(request_size, bool) or not isinstance(request_size, int) or request_size <= 0:
        raise InvalidConfiguration("Enter valid process size.")
    for size in sizes:
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise InvalidConfiguration(f"Hole sizes must be non-negative integers, got {size!r}")

    holes = [Hole(i, size) for i, size in enumerate(sizes)]
    return fit(holes, request_size, policy)


def describe(result: AllocationResult) -> str:
    if result.no_fit:
        return f"Process {result.request_size} KB cannot be allocated (no suitable hole)."
    return f"Allocated {result.request_size} KB at hole index {result.selected}."
