"""Attribute argument lists (`#[path(meta, meta = "lit", meta(..))]`)."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from lark import Token, Tree

from demo_derive.internals.parser import parse


@dataclass
class Meta:
    """One entry of an attribute argument list."""
    kind: str                           # "word" | "name_value" | "list"
    path: str
    value: Optional[Token] = None       # literal token for name_value entries
    nested: List["Meta"] = field(default_factory=list)

    @property
    def is_string(self) -> bool:
        return self.value is not None and self.value.type == "STRING"

    def string_value(self) -> str:
        assert self.value is not None
        return unquote_string(str(self.value))


def _path_text(t: Tree) -> str:
    assert t.data == "simple_path"
    return "".join(str(tok) for tok in t.children)


def _build_meta(t: Tree) -> Meta:
    path = _path_text(t.children[0])
    if t.data == "meta_word":
        return Meta("word", path)
    if t.data == "meta_name_value":
        return Meta("name_value", path, value=t.children[1])
    if t.data == "meta_call":
        return Meta("list", path, nested=[_build_meta(c) for c in t.children[1:]])
    raise ValueError(f"unexpected meta node '{t.data}'")


def parse_meta_args(text: str) -> List[Meta]:
    """Parse the inside of an attribute argument list.

    Raises:
        lark.UnexpectedInput: if the text is not a comma-separated meta list.
    """
    tree = parse(text, "meta_args")
    return [_build_meta(c) for c in tree.children]


# === String literals ===

_SIMPLE_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t", "0": "\0",
    "\\": "\\", "'": "'", '"': '"',
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F_]+\}|x[0-9a-fA-F]{2}|\n\s*|.)", re.DOTALL)


def _unescape(match: re.Match) -> str:
    esc = match.group(1)
    if esc.startswith("u{"):
        return chr(int(esc[2:-1].replace("_", ""), 16))
    if esc.startswith("x"):
        return chr(int(esc[1:], 16))
    if esc.startswith("\n"):
        # Line continuation: the newline and leading whitespace are dropped.
        return ""
    return _SIMPLE_ESCAPES.get(esc, "\\" + esc)


def unquote_string(literal: str) -> str:
    """Value of a Rust string literal token (plain, byte or raw)."""
    body = literal[1:] if literal.startswith("b") else literal
    if body.startswith("r"):
        hashes = len(body) - len(body[1:].lstrip("#")) - 1
        return body[2 + hashes:len(body) - 1 - hashes]
    return _ESCAPE_RE.sub(_unescape, body[1:-1])
