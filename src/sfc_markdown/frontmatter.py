from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import PurePath

from .fences import FENCE_RE, is_fence_close
from .render import WHITESPACE_STAGES, apply_stages


TITLE_SEPARATORS_RE = re.compile(r"[-_\s]+")
FRONTMATTER_RE = re.compile(r"\A---\n.*?\n---\n*", re.DOTALL)
YAML_UNSAFE_RE = re.compile(r"(^[\s\-?:,\[\]{}#&*!|>'\"%@`])|(:\s)|(\s#)|(\s$)")


@dataclass(frozen=True, slots=True)
class MarkdownDocument:
    title: str
    description: str
    body: str

    @property
    def frontmatter(self) -> str:
        return "\n".join(
            [
                "---",
                f"title: {_yaml_scalar(self.title)}",
                f"description: {_yaml_scalar(self.description)}",
                "---",
            ]
        )

    @property
    def text(self) -> str:
        return f"{self.frontmatter}\n\n{self.body}\n"


def _yaml_scalar(value: str) -> str:
    if not value or YAML_UNSAFE_RE.search(value):
        return json.dumps(value, ensure_ascii=False)
    return value


def derive_title(filename: str) -> str:
    """``quick-start.vue`` -> ``Quick Start``."""

    stem = PurePath(filename).stem
    words = [word for word in TITLE_SEPARATORS_RE.split(stem) if word]
    return " ".join(word[0].upper() + word[1:] for word in words)


def describe(title: str, product_name: str) -> str:
    return f"{title} documentation for {product_name}."


def _is_h1(line: str) -> bool:
    return line == "#" or line.startswith("# ")


def ensure_leading_heading(body: str, title: str) -> str:
    """Make sure ``body`` opens with exactly one ``#`` heading.

    An H1 already on the first line is kept. Otherwise the first H1 outside
    fenced code is moved to the top, and failing that ``# title`` is added.
    """

    lines = body.split("\n")
    if lines and _is_h1(lines[0]):
        return body
    fence: str | None = None
    for index, line in enumerate(lines):
        opening = FENCE_RE.match(line)
        if fence is None and opening:
            fence = opening.group(1)
            continue
        if fence is not None:
            if is_fence_close(line, fence):
                fence = None
            continue
        if _is_h1(line):
            remaining = lines[:index] + lines[index + 1 :]
            rest = "\n".join(remaining).strip()
            return f"{line}\n\n{rest}" if rest else line
    rest = body.strip()
    return f"# {title}\n\n{rest}" if rest else f"# {title}"


def strip_frontmatter(body: str) -> str:
    return FRONTMATTER_RE.sub("", body, count=1)


def compose_document(body: str, filename: str, product_name: str) -> MarkdownDocument:
    title = derive_title(filename)
    content = ensure_leading_heading(strip_frontmatter(body.strip()).strip(), title)
    content = apply_stages(content, WHITESPACE_STAGES)
    return MarkdownDocument(title=title, description=describe(title, product_name), body=content)


__all__ = [
    "MarkdownDocument",
    "compose_document",
    "derive_title",
    "describe",
    "ensure_leading_heading",
    "strip_frontmatter",
]
