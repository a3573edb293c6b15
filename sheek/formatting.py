"""Text helpers for rendering history entries."""

from __future__ import annotations

import time

NEWLINE_MARKER = " ⏎ "


def one_line(text: str) -> str:
    """Collapse a multi-line command onto a single display line."""
    return text.replace("\n", NEWLINE_MARKER)


def one_line_positions(text: str, positions: list[int]) -> list[int]:
    """Map positions in text to positions in one_line(text)."""
    shift = len(NEWLINE_MARKER) - 1
    mapped: list[int] = []
    newlines = 0
    pos_iter = iter(sorted(positions))
    target = next(pos_iter, None)
    for i, ch in enumerate(text):
        if target is None:
            break
        if i == target:
            mapped.append(i + newlines * shift)
            target = next(pos_iter, None)
        if ch == "\n":
            newlines += 1
    return mapped


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters with an ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max(max_len - 1, 0)] + "…"


def format_time_ago(timestamp: float, now: float | None = None) -> str:
    """Format a timestamp as short relative time (e.g., '2h ago')."""
    delta = (time.time() if now is None else now) - timestamp
    if delta < 60:
        return "just now"
    elif delta < 3600:
        return f"{int(delta / 60)}m ago"
    elif delta < 86400:
        return f"{int(delta / 3600)}h ago"
    elif delta < 604800:
        return f"{int(delta / 86400)}d ago"
    elif delta < 31536000:
        return f"{int(delta / 604800)}w ago"
    else:
        return f"{int(delta / 31536000)}y ago"
