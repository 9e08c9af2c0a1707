"""Name casing, usage-text shaping and import bookkeeping helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import MutableMapping

SHORT_DESC_MAX = 50
"""Maximum length accepted for short usage text."""

LONG_DESC_MAX = 150
"""Maximum length accepted for long usage text."""

_WORD = re.compile(r"\w+(?:'\w+)*")


@dataclass(frozen=True)
class ImportSpec:
    """A Go import: its path and, optionally, the name it is bound to."""

    path: str = ""
    name: str = ""


def to_title(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched."""
    return _WORD.sub(lambda m: m[0][0].title() + m[0][1:], text)


def title(name: str) -> str:
    """Title-case each segment, dropping underscores but keeping dots."""
    return "".join(
        ".".join(to_title(part) for part in chunk.split("."))
        for chunk in name.split("_")
    )


def dot_to_camel(name: str) -> str:
    """Join dot-separated segments in title case; underscores are kept."""
    return "".join(to_title(part) for part in name.split("."))


def shorten(comment: str, limit: int) -> str:
    """Cut ``comment`` at the last space before ``limit`` and add an ellipsis."""
    if len(comment) <= limit:
        return comment
    sep = comment.rfind(" ", 0, limit)
    if sep == -1:
        sep = limit
    return comment[:sep] + "..."


def to_long_usage(comment: str) -> str:
    """Shorten a comment to the long usage limit."""
    return shorten(comment, LONG_DESC_MAX)


def to_short_usage(comment: str) -> str:
    """Shorten a comment to the short usage limit."""
    return shorten(comment, SHORT_DESC_MAX)


def sanitize_comment(comment: str) -> str:
    """Make a comment safe to embed in a double-quoted, single-line string."""
    comment = comment.replace("\\", "\\\\")
    comment = comment.replace("\n", " ")
    comment = comment.replace('"', "'")
    return comment.strip()


def put_import(imports: MutableMapping[str, ImportSpec], spec: ImportSpec) -> None:
    """Record ``spec`` under its name, or under its path when it has no name."""
    imports[spec.name or spec.path] = spec