"""
FileChat Agent - Directive Parser.

The model is told to embed two kinds of inline tags in its answer:

    [VIZ:<chartKind>:<title>:<description>]
    [TABLE:<title>:<description>]

Titles cannot contain ':' or ']'. A description runs to the next ':' and
anything after it is ignored. Bracketed tags that start like a directive
but do not fit the grammar come back as ParseFailure and stay in the text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

# Any bracketed VIZ/TABLE tag without a nested ']'
CANDIDATE_PATTERN = re.compile(r"\[(VIZ|TABLE):([^\]]*)\]")

VIZ_BODY = re.compile(r"([^:\]]+):([^:\]]+):([^\]]+)")
TABLE_BODY = re.compile(r"([^:\]]+):([^\]]+)")


@dataclass(frozen=True)
class VisualizationDirective:
    chart_kind: str
    title: str
    description: str
    span: tuple[int, int]


@dataclass(frozen=True)
class TableDirective:
    title: str
    description: str
    span: tuple[int, int]


@dataclass(frozen=True)
class ParseFailure:
    raw: str
    reason: str
    span: tuple[int, int]


Directive = Union[VisualizationDirective, TableDirective, ParseFailure]


def _first_field(value: str) -> str:
    return value.split(":", 1)[0]


def parse_directive(tag: str, body: str, span: tuple[int, int], raw: str) -> Directive:
    """Parse the body of one bracketed tag."""
    if tag == "VIZ":
        match = VIZ_BODY.fullmatch(body)
        if not match:
            return ParseFailure(raw=raw, reason="expected [VIZ:chartKind:title:description]", span=span)
        chart_kind, title, description = match.groups()
        return VisualizationDirective(
            chart_kind=chart_kind,
            title=title,
            description=_first_field(description),
            span=span,
        )

    match = TABLE_BODY.fullmatch(body)
    if not match:
        return ParseFailure(raw=raw, reason="expected [TABLE:title:description]", span=span)
    title, description = match.groups()
    return TableDirective(title=title, description=_first_field(description), span=span)


def parse_directives(text: str) -> list[Directive]:
    """All directive-shaped tags in ``text``, left to right, non-overlapping."""
    return [
        parse_directive(m.group(1), m.group(2), m.span(), m.group(0))
        for m in CANDIDATE_PATTERN.finditer(text)
    ]


def _remove_spans(text: str, directives: list[Directive]) -> str:
    pieces = []
    cursor = 0
    for directive in directives:
        if isinstance(directive, ParseFailure):
            continue
        start, end = directive.span
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces).strip()


def strip_directives(text: str, directives: list[Directive] | None = None) -> str:
    """
    Remove well-formed directives from ``text`` and trim the result.

    ParseFailure spans are left in place. Removing a nested tag can join
    the text around it into a new tag, so passes repeat until nothing
    changes.
    """
    if directives is None:
        directives = parse_directives(text)

    stripped = _remove_spans(text, directives)
    while True:
        again = _remove_spans(stripped, parse_directives(stripped))
        if again == stripped:
            return stripped
        stripped = again
