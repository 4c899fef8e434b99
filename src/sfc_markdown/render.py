"""Render component markup as Markdown.

Markup is parsed into a BeautifulSoup tree, directive attributes and component
tags are stripped at node level, and :class:`ComponentMarkdownConverter` (a
``markdownify`` converter) renders what is left. Fenced code already present
in the input is set aside before parsing and restored verbatim. Two ordered
text passes finish the document: bullet-glyph normalization and whitespace
collapse. Neither touches fenced code.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import Iterable

from bs4 import BeautifulSoup, NavigableString
from bs4.builder import ParserRejectedMarkup
from bs4.element import PreformattedString, Tag
from markdownify import ATX, BACKSLASH, MarkdownConverter

from .directives import StripReport, strip_directives
from .errors import TransformationError
from .fences import iter_segments, protect_fences, restore_fences


LIST_TAGS = frozenset({"ul", "ol"})
DROPPED_TAGS = frozenset(
    {"script", "style", "svg", "math", "iframe", "noscript", "canvas", "head", "title", "meta", "link", "input", "select", "textarea"}
)
FLOW_CONTAINERS = frozenset(
    {"[document]", "html", "body", "div", "section", "article", "main", "header", "footer", "aside", "nav"}
)
STYLED_CONTAINER_MARKERS = ("code", "highlight")

TAG_LIKE_RE = re.compile(r"<(?=[A-Za-z/!?])")
BACKTICK_RUN_RE = re.compile(r"`+")
PARAGRAPH_BREAK_RE = re.compile(r"[ \t]*\n[ \t]*\n\s*")
PARAGRAPH_MARK = "\ue000"


@dataclass(frozen=True, slots=True)
class TransformationStage:
    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _stage(name: str, pattern: str, replacement: str, flags: int = re.MULTILINE) -> TransformationStage:
    return TransformationStage(name=name, pattern=re.compile(pattern, flags), replacement=replacement)


BULLET_STAGES: tuple[TransformationStage, ...] = (
    _stage("bullet-glyph", r"^•\s*", "- "),
    _stage("asterisk-bullet", r"^\*\s+(?!\*)", "- "),
    _stage("nested-circle-glyph", r"^◦\s*", "  - "),
    _stage("nested-square-glyph", r"^▪\s*", "  - "),
    _stage("dash-bullet-glyph", r"^-\s*•\s*", "- "),
    _stage("dash-asterisk", r"^-\s*\*\s+", "- "),
    _stage("double-dash", r"^-\s+-\s+", "- "),
)

WHITESPACE_STAGES: tuple[TransformationStage, ...] = (
    _stage("trailing-space", r"[ \t]+$", ""),
    _stage("blank-runs", r"\n{3,}", "\n\n", 0),
)

POST_STAGES = BULLET_STAGES + WHITESPACE_STAGES


@dataclass(frozen=True, slots=True)
class TransformResult:
    markdown: str
    report: StripReport


def _language(tag: Tag | None) -> str | None:
    if tag is None:
        return None
    for cls in tag.get("class") or []:
        for prefix in ("language-", "lang-"):
            if cls.startswith(prefix) and len(cls) > len(prefix):
                return cls[len(prefix) :]
    return None


def _class_string(tag: Tag) -> str:
    value = tag.get("class") or []
    if isinstance(value, str):
        return value
    return " ".join(value)


def _fence_block(code: str, language: str = "") -> str:
    body = textwrap.dedent(code).strip("\n")
    if not body.strip():
        return ""
    body = "\n".join(line.rstrip() for line in body.split("\n"))
    longest = max((len(run) for run in BACKTICK_RUN_RE.findall(body)), default=0)
    fence = "`" * max(3, longest + 1)
    return f"\n\n{fence}{language}\n{body}\n{fence}\n\n"


def apply_stages(text: str, stages: Iterable[TransformationStage]) -> str:
    """Apply ``stages`` in order to everything outside fenced code.

    Each unfenced chunk is run with the line breaks that border it, so a
    blank run that straddles a fence is still collapsed.
    """

    stages = tuple(stages)
    segments = list(iter_segments(text))
    pieces: list[str] = []
    for index, (fenced, chunk) in enumerate(segments):
        if fenced:
            if index and segments[index - 1][0]:
                chunk = "\n" + chunk
            pieces.append(chunk)
            continue
        if index:
            chunk = "\n" + chunk
        if index < len(segments) - 1:
            chunk += "\n"
        for stage in stages:
            chunk = stage.apply(chunk)
        pieces.append(chunk)
    return "".join(pieces)


class ComponentMarkdownConverter(MarkdownConverter):
    """Markdown converter for stripped component markup."""

    class Options(MarkdownConverter.DefaultOptions):
        heading_style = ATX
        bullets = "-"
        newline_style = BACKSLASH
        escape_asterisks = False
        escape_underscores = False
        escape_misc = False
        autolinks = False
        table_infer_header = True

    def escape(self, text, parent_tags):
        # Decoded text that reads as a tag is written back as an entity.
        return TAG_LIKE_RE.sub("&lt;", super().escape(text, parent_tags))

    def convert_hN(self, n, el, text, parent_tags):
        if not text.strip():
            return ""
        return super().convert_hN(n, el, text, parent_tags)

    def convert_pre(self, el, text, parent_tags):
        language = _language(el) or _language(el.find("code")) or ""
        return _fence_block(el.get_text(), language)

    def convert_code(self, el, text, parent_tags):
        language = _language(el)
        if language is not None and "pre" not in parent_tags and "_inline" not in parent_tags:
            return _fence_block(el.get_text(), language)
        return super().convert_code(el, text, parent_tags)

    def convert_div(self, el, text, parent_tags):
        if "_inline" not in parent_tags and self._is_styled_container(el):
            return _fence_block(el.get_text())
        return super().convert_div(el, text, parent_tags)

    def _is_styled_container(self, el: Tag) -> bool:
        classes = _class_string(el)
        if not any(marker in classes for marker in STYLED_CONTAINER_MARKERS):
            return False
        return el.find("pre") is None

    def convert_li(self, el, text, parent_tags):
        parent = el.parent
        if parent is None or parent.name != "ol":
            return super().convert_li(el, text, parent_tags)
        # Numbering always restarts at 1; ``start`` and ``value`` are ignored.
        text = (text or "").strip()
        if not text:
            return "\n"
        bullet = f"{len(el.find_previous_siblings('li')) + 1}. "
        pad = " " * len(bullet)
        first, *rest = text.split("\n")
        lines = [bullet + first, *(pad + line if line else "" for line in rest)]
        return "\n".join(lines) + "\n"

    def convert_img(self, el, text, parent_tags):
        if not str(el.get("src") or "").strip():
            return ""
        return super().convert_img(el, text, parent_tags)

    def convert_td(self, el, text, parent_tags):
        return super().convert_td(el, text.replace("|", "\\|"), parent_tags)

    def convert_th(self, el, text, parent_tags):
        return super().convert_th(el, text.replace("|", "\\|"), parent_tags)


def parse_markup(markup: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(markup, "html.parser")
    except (ParserRejectedMarkup, AssertionError) as exc:
        raise TransformationError(f"Markup could not be parsed: {exc}") from exc


def _drop_unrendered(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(sorted(DROPPED_TAGS)):
        if not tag.decomposed:
            tag.decompose()


def _attach_stray_lists(soup: BeautifulSoup) -> None:
    """Move a list that sits directly in another list into the item before it."""

    for tag in soup.find_all(["ul", "ol"]):
        if tag.parent is None or tag.parent.name not in LIST_TAGS:
            continue
        previous = tag.find_previous_sibling("li")
        if previous is not None:
            previous.append(tag.extract())


def _mark_paragraph_breaks(soup: BeautifulSoup) -> None:
    # Blank lines in loose text separate paragraphs; the converter would
    # otherwise fold them into one line break.
    for node in soup.find_all(string=True):
        if isinstance(node, PreformattedString) or not node.strip():
            continue
        if not all(parent.name in FLOW_CONTAINERS for parent in node.parents):
            continue
        marked = PARAGRAPH_BREAK_RE.sub(PARAGRAPH_MARK, str(node))
        if marked != node:
            node.replace_with(NavigableString(marked))


def transform(markup: str) -> TransformResult:
    """Strip directives from ``markup`` and render the remaining tree."""

    protected, fences = protect_fences(markup)
    soup = parse_markup(protected)
    try:
        report = strip_directives(soup)
        _drop_unrendered(soup)
        _attach_stray_lists(soup)
        _mark_paragraph_breaks(soup)
        text = ComponentMarkdownConverter().convert_soup(soup)
    except RecursionError as exc:
        raise TransformationError("Markup is nested too deeply to render") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise TransformationError(f"Markup could not be rendered: {type(exc).__name__}: {exc}") from exc
    text = restore_fences(text.replace(PARAGRAPH_MARK, "\n\n"), fences, padding="\n\n")
    markdown = apply_stages(text, POST_STAGES).strip()
    return TransformResult(markdown=markdown, report=report)


def render_markdown(markup: str) -> str:
    return transform(markup).markdown


__all__ = [
    "BULLET_STAGES",
    "ComponentMarkdownConverter",
    "TransformResult",
    "TransformationStage",
    "WHITESPACE_STAGES",
    "apply_stages",
    "parse_markup",
    "render_markdown",
    "transform",
]
