"""Render generated constructors as Rust source text."""
from __future__ import annotations

from typing import List

from demo_derive.semantics.ast import GeneratedConstructor

INDENT = "    "


def doc_attr(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'#[doc = "{escaped}"]'


def render_signature(ctor: GeneratedConstructor) -> str:
    vis = f"{ctor.visibility} " if ctor.visibility else ""
    params = ", ".join(str(p) for p in ctor.params)
    return f"{vis}fn {ctor.name}({params}) -> Self"


def render_impl(ctor: GeneratedConstructor) -> str:
    """One `impl` block holding the constructor.

    The impl header carries the constructor's generics (declared bounds plus
    any inferred `Default` bounds); parameter defaults are never emitted.
    """
    g = ctor.generics
    lines = [
        f"impl{g.impl_generics()} {ctor.type_name}{g.ty_generics()}{g.where_text()} {{",
        f"{INDENT}{doc_attr(ctor.doc)}",
    ]
    lines.extend(f"{INDENT}{attr}" for attr in ctor.lint_attrs)
    lines.append(f"{INDENT}{render_signature(ctor)} {{")
    lines.append(f"{INDENT * 2}{ctor.body}")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return "\n".join(lines)


def render_all(ctors: List[GeneratedConstructor]) -> str:
    return "\n\n".join(render_impl(c) for c in ctors)
