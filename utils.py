# utils.py

import config
from paging import OutcomeKind


def get_color(kind):
    """Return a color for a frame after an access (None = untouched)."""
    if kind is OutcomeKind.HIT:
        return config.HIT_COLOR
    if kind is OutcomeKind.FAULT:
        return config.FAULT_COLOR
    return config.FREE_COLOR


def hole_color(selected):
    return config.SELECTED_HOLE_COLOR if selected else config.HOLE_COLOR


def frame_label(index, page):
    return f"F{index}: " + (f"P{page}" if page is not None else "Free")


def timeline_label(outcome):
    """Timeline entry text, numbered from 1."""
    text = f"#{outcome.time + 1} → Page {outcome.page} • {outcome.kind.value}"
    if outcome.victim is not None:
        text += f" (evicted {outcome.victim})"
    return text
