"""Fenced code regions in Markdown text.

Fences already present in the input (re-converted output, hand-written
Markdown) are swapped for placeholder tokens before any HTML handling and
put back verbatim afterwards.
"""

from __future__ import annotations

import re
from typing import Iterator

FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
RAW_OPEN_RE = re.compile(r"<(?:pre|script|style|textarea)(?=[\s>/])", re.IGNORECASE)
RAW_CLOSE_RE = re.compile(r"</(?:pre|script|style|textarea)\s*>", re.IGNORECASE)

FENCE_TOKEN = "\ue001{}\ue001"
FENCE_TOKEN_RE = re.compile(r"[ \t]*\ue001(\d+)\ue001[ \t]*")


def is_fence_close(line: str, fence: str) -> bool:
    """True when ``line`` closes a block opened with ``fence``.

    A closing line holds nothing but fence characters, at least as many as
    the opening run.
    """

    stripped = line.strip()
    return stripped.startswith(fence) and stripped.strip(fence[0]) == ""


def iter_segments(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(fenced, chunk)`` pairs covering ``text`` in order."""

    buffer: list[str] = []
    fence: str | None = None
    for line in text.split("\n"):
        opening = FENCE_RE.match(line)
        if fence is None and opening:
            if buffer:
                yield False, "\n".join(buffer)
            buffer = [line]
            fence = opening.group(1)
        elif fence is not None and is_fence_close(line, fence):
            buffer.append(line)
            yield True, "\n".join(buffer)
            buffer = []
            fence = None
        else:
            buffer.append(line)
    if buffer:
        yield fence is not None, "\n".join(buffer)


def _closing_index(lines: list[str], start: int, fence: str) -> int | None:
    for index in range(start, len(lines)):
        if is_fence_close(lines[index], fence):
            return index
    return None


def protect_fences(text: str) -> tuple[str, list[str]]:
    """Replace each closed fence in ``text`` with a one-line placeholder.

    Fence-looking lines inside ``<pre>``, ``<script>``, ``<style>`` or
    ``<textarea>`` are raw content and stay where they are, as do openers
    whose info string contains markup.
    """

    lines = text.split("\n")
    fences: list[str] = []
    kept: list[str] = []
    raw_depth = 0
    index = 0
    while index < len(lines):
        line = lines[index]
        opening = FENCE_RE.match(line)
        if raw_depth == 0 and opening and "<" not in line:
            closing = _closing_index(lines, index + 1, opening.group(1))
            if closing is not None:
                kept.append(FENCE_TOKEN.format(len(fences)))
                fences.append("\n".join(lines[index : closing + 1]))
                index = closing + 1
                continue
        raw_depth = max(0, raw_depth + len(RAW_OPEN_RE.findall(line)) - len(RAW_CLOSE_RE.findall(line)))
        kept.append(line)
        index += 1
    return "\n".join(kept), fences


def restore_fences(text: str, fences: list[str], padding: str = "") -> str:
    if not fences:
        return text
    return FENCE_TOKEN_RE.sub(lambda match: f"{padding}{fences[int(match.group(1))]}{padding}", text)


__all__ = [
    "FENCE_RE",
    "is_fence_close",
    "iter_segments",
    "protect_fences",
    "restore_fences",
]
