"""Isolate the markup section of a single-file component."""

from __future__ import annotations

import re

from .errors import ExtractionError
from .fences import protect_fences, restore_fences


TEMPLATE_OPEN_RE = re.compile(r"<template(?=[\s>/])[^>]*>", re.IGNORECASE)
TEMPLATE_CLOSE = "</template>"
COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")

# A comment is matched as a whole before any tag inside it can be.
SCRIPT_RE = re.compile(r"(<!--[\s\S]*?-->)|<script(?=[\s>/])[^>]*>[\s\S]*?</script\s*>", re.IGNORECASE)
STYLE_RE = re.compile(r"(<!--[\s\S]*?-->)|<style(?=[\s>/])[^>]*>[\s\S]*?</style\s*>", re.IGNORECASE)

SCRIPT_OPEN_RE = re.compile(r"<script(?=[\s>/])", re.IGNORECASE)
STYLE_OPEN_RE = re.compile(r"<style(?=[\s>/])", re.IGNORECASE)


def _unwrap_root_template(text: str) -> str:
    opening = TEMPLATE_OPEN_RE.search(text)
    if opening is None:
        return text
    closing = text.lower().rfind(TEMPLATE_CLOSE)
    if closing < opening.end():
        raise ExtractionError("Unterminated <template> section")
    return text[: opening.start()] + text[opening.end() : closing] + text[closing + len(TEMPLATE_CLOSE) :]


def _remove_blocks(text: str, pattern: re.Pattern[str], opening: re.Pattern[str], label: str) -> str:
    text = pattern.sub(lambda match: match.group(1) or "", text)
    if opening.search(COMMENT_RE.sub("", text)):
        raise ExtractionError(f"Unterminated <{label}> block")
    return text


def _remove_comments(text: str) -> str:
    text = COMMENT_RE.sub("", text)
    if "<!--" in text:
        raise ExtractionError("Unterminated HTML comment")
    return text


def extract_markup(text: str) -> str:
    """Return the markup-only portion of ``text``.

    The root ``<template>`` wrapper goes first, then ``<script>`` and
    ``<style>`` blocks, then comments. Nested ``<template>`` elements are
    left for the directive stripper, and Markdown code fences are left
    untouched.
    """

    content, fences = protect_fences(text)
    content = _unwrap_root_template(content)
    content = _remove_blocks(content, SCRIPT_RE, SCRIPT_OPEN_RE, "script")
    content = _remove_blocks(content, STYLE_RE, STYLE_OPEN_RE, "style")
    content = _remove_comments(content)
    return restore_fences(content.strip(), fences)


__all__ = ["extract_markup"]
