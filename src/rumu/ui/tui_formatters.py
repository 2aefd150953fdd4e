from __future__ import annotations

import math


def ellipsize(text: str, max_len: int) -> str:
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return "." * max_len
    return text[: max_len - 3] + "..."


def format_seconds(value: float | None) -> str:
    if value is None or value < 0 or math.isnan(value):
        return "--:--"
    total_seconds = int(value)
    minutes, seconds = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def progress_ratio(time_remaining: float, duration: float) -> float:
    """Fraction of the song already played, 0.0 when unknown."""
    if duration <= 0:
        return 0.0
    ratio = 1.0 - time_remaining / duration
    if math.isnan(ratio):
        return 0.0
    return max(0.0, min(1.0, ratio))


def format_progress(time_remaining: float, duration: float) -> tuple[str, float]:
    if duration <= 0:
        return "--:-- / --:--", 0.0
    ratio = progress_ratio(time_remaining, duration)
    elapsed = max(0.0, duration - time_remaining)
    return f"{format_seconds(elapsed)} / {format_seconds(duration)}", ratio


def render_status_bar(width: int, ratio: float) -> str:
    if width <= 0:
        return ""
    if width < 3:
        return "=" * width if ratio >= 1.0 else "-" * width
    inner = width - 2
    filled = int(max(0.0, min(1.0, ratio)) * inner)
    return "[" + "=" * filled + "-" * (inner - filled) + "]"
