"""Templating directives and component tags that have no Markdown form.

Directives are recognised while walking the parsed node tree and removed at
the node level. Component elements are unwrapped so that their children stay
in place for the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True, slots=True)
class ConditionalDirective:
    name: str
    expression: str
    tag: str


@dataclass(frozen=True, slots=True)
class LoopDirective:
    name: str
    expression: str
    tag: str


@dataclass(frozen=True, slots=True)
class BindingAttribute:
    name: str
    expression: str
    tag: str

    @property
    def target(self) -> str:
        for prefix in ("v-bind:", ":", "v-slot:", "#", "v-"):
            if self.name.startswith(prefix):
                return self.name[len(prefix) :]
        return self.name


@dataclass(frozen=True, slots=True)
class EventAttribute:
    name: str
    expression: str
    tag: str

    @property
    def event(self) -> str:
        if self.name.startswith("@"):
            return self.name[1:]
        return self.name[len("v-on:") :]


Directive = Union[ConditionalDirective, LoopDirective, BindingAttribute, EventAttribute]

CONDITIONAL_NAMES = frozenset({"v-if", "v-else-if", "v-else", "v-show"})
LOOP_NAMES = frozenset({"v-for"})

# Standard HTML elements; anything else is treated as a component.
HTML_ELEMENTS = frozenset(
    {
        "a", "abbr", "address", "area", "article", "aside", "audio", "b", "bdi", "bdo",
        "blockquote", "body", "br", "button", "canvas", "caption", "cite", "code", "col",
        "colgroup", "data", "datalist", "dd", "del", "details", "dfn", "dialog", "div",
        "dl", "dt", "em", "embed", "fieldset", "figcaption", "figure", "footer", "form",
        "h1", "h2", "h3", "h4", "h5", "h6", "head", "header", "hgroup", "hr", "html", "i",
        "iframe", "img", "input", "ins", "kbd", "label", "legend", "li", "link", "main",
        "map", "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
        "optgroup", "option", "output", "p", "param", "picture", "pre", "progress", "q",
        "rp", "rt", "ruby", "s", "samp", "script", "search", "section", "select", "small",
        "source", "span", "strong", "style", "sub", "summary", "sup", "svg", "math",
        "table", "tbody", "td", "textarea", "tfoot", "th", "thead", "time", "title", "tr",
        "track", "u", "ul", "var", "video", "wbr",
    }
)

# Vue fragment and built-in elements that render no markup of their own.
FRAGMENT_TAGS = frozenset(
    {"template", "slot", "component", "transition", "transition-group", "keep-alive", "teleport", "suspense"}
)

ROUTER_LINK_TAGS = frozenset({"router-link", "routerlink", "nuxt-link", "nuxtlink"})

# Children of these elements are SVG/MathML vocabulary, not components.
FOREIGN_ROOTS = ("svg", "math")


def classify_attribute(name: str, value: str, tag: str) -> Directive | None:
    """Map a raw attribute onto a directive variant, or ``None`` for plain attributes."""

    if name in CONDITIONAL_NAMES:
        return ConditionalDirective(name=name, expression=value, tag=tag)
    if name in LOOP_NAMES:
        return LoopDirective(name=name, expression=value, tag=tag)
    if name.startswith("@") or name.startswith("v-on:"):
        return EventAttribute(name=name, expression=value, tag=tag)
    if name.startswith((":", "#", "v-")):
        return BindingAttribute(name=name, expression=value, tag=tag)
    return None


def is_component(tag: Tag) -> bool:
    name = tag.name.lower()
    if name in FRAGMENT_TAGS:
        return True
    if name in HTML_ELEMENTS:
        return False
    return tag.find_parent(FOREIGN_ROOTS) is None


@dataclass(slots=True)
class StripReport:
    directives: list[Directive] = field(default_factory=list)
    components: list[str] = field(default_factory=list)

    @property
    def flattened(self) -> bool:
        return bool(self.components)

    def count(self, kind: type) -> int:
        return sum(1 for directive in self.directives if isinstance(directive, kind))


def _attribute_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return "" if value is None else str(value)


def _strip_attributes(tag: Tag, report: StripReport) -> None:
    for name in list(tag.attrs):
        directive = classify_attribute(name, _attribute_value(tag.attrs[name]), tag.name)
        if directive is not None:
            report.directives.append(directive)
            del tag.attrs[name]


def _convert_router_link(tag: Tag) -> bool:
    target = tag.attrs.get("to")
    if not target:
        return False
    href = _attribute_value(target)
    tag.name = "a"
    tag.attrs = {"href": href}
    return True


def strip_directives(root: BeautifulSoup | Tag) -> StripReport:
    """Remove directive attributes and unwrap component tags in place."""

    report = StripReport()
    for tag in list(root.find_all(True)):
        _strip_attributes(tag, report)
        if tag.name.lower() in ROUTER_LINK_TAGS and _convert_router_link(tag):
            continue
        if is_component(tag):
            if tag.name not in FRAGMENT_TAGS:
                report.components.append(tag.name)
            tag.unwrap()
    return report


__all__ = [
    "BindingAttribute",
    "ConditionalDirective",
    "Directive",
    "EventAttribute",
    "LoopDirective",
    "StripReport",
    "classify_attribute",
    "is_component",
    "strip_directives",
]
