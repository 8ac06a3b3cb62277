"""Lark parser setup shared by the declaration front end and the sub-parsers."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, Tree, UnexpectedInput

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

START_RULES = ["items", "type_expr", "tokens", "meta_args", "visibility"]


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the LALR parser once per process; parsing itself keeps no state."""
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        lexer="contextual",
        start=START_RULES,
        propagate_positions=True,
        maybe_placeholders=False,
    )


def parse(text: str, start: str) -> Tree:
    return get_parser().parse(text, start=start)


def parse_items(src: str, dump_parse: bool = False) -> Tree:
    tree = parse(src, "items")
    if dump_parse:
        print(tree.pretty())
    return tree


def try_parse(text: str, start: str) -> Tree | None:
    """Parse `text` from `start`, returning None when it is not well-formed."""
    try:
        return parse(text, start)
    except UnexpectedInput:
        return None


def describe_parse_error(e: UnexpectedInput) -> str:
    """One-line summary of a lark error (the full text spans several lines)."""
    line = getattr(e, "line", None)
    col = getattr(e, "column", None)
    where = f" at line {line}, column {col}" if line not in (None, -1) else ""
    token = getattr(e, "token", None)
    if token is not None:
        if token.type == "$END":
            return f"unexpected end of input{where}"
        return f"unexpected `{token}`{where}"
    char = getattr(e, "char", None)
    if char is not None:
        return f"unexpected character {char!r}{where}"
    return str(e).splitlines()[0]


# Terminals the grammar ignores between tokens.
SPACING_TERMINALS = frozenset({"WS", "LINE_COMMENT", "BLOCK_COMMENT"})


def normalize_tokens(text: str) -> str:
    """Token text of `text` with comments dropped and spacing collapsed.

    Every run of whitespace and comments becomes a single space; tokens,
    including string literals, are kept exactly as written.

    Examples:
        >>> normalize_tokens("HashMap<\\n    K, // key\\n    V,\\n>")
        'HashMap< K, V, >'

    Raises:
        lark.UnexpectedInput: if `text` cannot be tokenized.
    """
    out = []
    pending_space = False
    for tok in get_parser().lex(text, dont_ignore=True):
        if tok.type in SPACING_TERMINALS:
            pending_space = True
            continue
        if pending_space and out:
            out.append(" ")
        pending_space = False
        out.append(str(tok))
    return "".join(out)
