"""Construction expressions for generated constructor bodies."""
from __future__ import annotations

from typing import List, Optional

from demo_derive.backend.constants import (
    COLLECT_FN,
    DEFAULT_CALL,
    INTO_FN,
    INTO_ITER_FN,
    MARKER_VALUE,
)
from demo_derive.semantics.policy import (
    ClassifiedField,
    Default,
    Into,
    IntoIter,
    PhantomMarker,
    Required,
    ValueExpr,
)


def field_init(entry: ClassifiedField) -> str:
    """Expression that populates one field."""
    name = entry.field.ident
    policy = entry.policy
    if isinstance(policy, Required):
        return name
    if isinstance(policy, Into):
        return f"{INTO_FN}({name})"
    if isinstance(policy, IntoIter):
        return f"{COLLECT_FN}({INTO_ITER_FN}({name}))"
    if isinstance(policy, Default):
        return DEFAULT_CALL
    if isinstance(policy, ValueExpr):
        return policy.text
    if isinstance(policy, PhantomMarker):
        return MARKER_VALUE
    raise TypeError(f"unknown policy {policy!r}")


def construction_path(type_name: str, variant: Optional[str]) -> str:
    return type_name if variant is None else f"{type_name}::{variant}"


def build_body(type_name: str, variant: Optional[str], style: str,
               table: List[ClassifiedField]) -> str:
    """Struct or variant literal built from every field, in declaration order.

    named → `Path { a: <expr>, b: <expr> }`, tuple → `Path(<expr>, <expr>)`,
    unit → `Path`.
    """
    path = construction_path(type_name, variant)
    if style == "unit":
        return path
    if style == "named":
        inits = ", ".join(f"{e.field.ident}: {field_init(e)}" for e in table)
        return f"{path} {{ {inits} }}" if inits else f"{path} {{}}"
    return f"{path}({', '.join(field_init(e) for e in table)})"
