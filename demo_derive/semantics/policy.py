"""Field policies and the annotation parser that produces them.

Every field resolves to exactly one policy:

    (no annotation)           Required       constructor argument of the field type
    #[Demo(default)]          Default        filled with Default::default()
    #[Demo(value = "expr")]   ValueExpr      filled with `expr`, spliced verbatim
    #[Demo(into)]             Into           argument of `impl Into<FieldType>`
    #[Demo(into_iter = "T")]  IntoIter       argument of `impl IntoIterator<Item = T>`
    PhantomData<..> field     PhantomMarker  filled with the marker value

Marker fields are detected from the field type, never from an annotation.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from lark import UnexpectedInput

from demo_derive.internals import errors as er
from demo_derive.internals.parser import describe_parse_error, normalize_tokens, try_parse
from demo_derive.internals.report import Reporter
from demo_derive.semantics.ast import Attribute, Field, TypeDeclaration
from demo_derive.semantics.meta import Meta, parse_meta_args
from demo_derive.semantics.types import is_marker_type, is_valid_type

ATTRIBUTE_NAME = "Demo"

LINT_NAMES = frozenset({"allow", "deny", "forbid", "warn"})


# === Policies ===

@dataclass(frozen=True)
class Required:
    pass

@dataclass(frozen=True)
class Default:
    pass

@dataclass(frozen=True)
class ValueExpr:
    text: str

@dataclass(frozen=True)
class Into:
    pass

@dataclass(frozen=True)
class IntoIter:
    element: str

@dataclass(frozen=True)
class PhantomMarker:
    pass

Policy = Union[Required, Default, ValueExpr, Into, IntoIter, PhantomMarker]

# Policies whose field becomes a constructor argument.
PARAMETER_POLICIES = (Required, Into, IntoIter)


def describe(policy: Policy) -> str:
    """Annotation spelling of a policy, used in diagnostics."""
    if isinstance(policy, Default):
        return "default"
    if isinstance(policy, Into):
        return "into"
    if isinstance(policy, ValueExpr):
        return f'value = "{policy.text}"'
    if isinstance(policy, IntoIter):
        return f'into_iter = "{policy.element}"'
    if isinstance(policy, PhantomMarker):
        return "marker"
    return "required"


@dataclass
class ClassifiedField:
    field: Field
    policy: Policy

    @property
    def is_parameter(self) -> bool:
        return isinstance(self.policy, PARAMETER_POLICIES)


# === Field annotations ===

def _demo_attrs(attrs: List[Attribute]) -> List[Attribute]:
    return [a for a in attrs if not a.inner and a.last_segment == ATTRIBUTE_NAME]


def _meta_to_policy(meta: Meta, attr: Attribute, reporter: Reporter) -> Optional[Policy]:
    """Translate one `#[Demo(..)]` entry; reports and returns None if invalid."""
    if meta.kind == "word":
        if meta.path == "default":
            return Default()
        if meta.path == "into":
            return Into()
        er.emit(reporter, er.ERR.CE2003, attr.loc, key=meta.path)
        return None

    if meta.kind == "list":
        er.emit(reporter, er.ERR.CE2005, attr.loc, key=meta.path)
        return None

    if not meta.is_string:
        er.emit(reporter, er.ERR.CE2006, attr.loc, key=meta.path, value=meta.value)
        return None

    text = meta.string_value()
    if meta.path == "value":
        expr = normalize_tokens(text) if try_parse(text, "tokens") is not None else ""
        if not expr:
            er.emit(reporter, er.ERR.CE2007, attr.loc, text=text)
            return None
        return ValueExpr(expr)
    if meta.path == "into_iter":
        if not is_valid_type(text):
            er.emit(reporter, er.ERR.CE2008, attr.loc, text=text)
            return None
        return IntoIter(normalize_tokens(text))

    er.emit(reporter, er.ERR.CE2004, attr.loc, key=meta.path)
    return None


def parse_field_policy(fld: Field, reporter: Reporter) -> Optional[Policy]:
    """Resolve the policy of one field.

    Returns None after reporting at least one error against the field.
    """
    ok = True
    seen_attr = False
    options: List[Tuple[Policy, Attribute]] = []

    for attr in _demo_attrs(fld.attrs):
        if attr.style != "list":
            if attr.path == ATTRIBUTE_NAME:
                er.emit(reporter, er.ERR.CE2001, attr.loc)
                ok = False
            continue
        if seen_attr:
            er.emit(reporter, er.ERR.CE2002, attr.loc, field=fld.display_name)
            ok = False
            continue
        seen_attr = True

        try:
            metas = parse_meta_args(attr.tokens)
        except UnexpectedInput as exc:
            er.emit(reporter, er.ERR.CE2011, attr.loc, reason=describe_parse_error(exc))
            ok = False
            continue

        if not metas:
            er.emit(reporter, er.ERR.CW2001, attr.loc, field=fld.display_name)
        for meta in metas:
            policy = _meta_to_policy(meta, attr, reporter)
            if policy is None:
                ok = False
            else:
                options.append((policy, attr))

    if len(options) > 1:
        (first, _), (second, attr) = options[0], options[1]
        er.emit(reporter, er.ERR.CE2009, attr.loc, field=fld.display_name,
                first=describe(first), second=describe(second))
        ok = False

    if is_marker_type(fld.ty):
        if options:
            policy, attr = options[0]
            er.emit(reporter, er.ERR.CE2010, attr.loc,
                    option=describe(policy), field=fld.display_name)
            ok = False
        return PhantomMarker() if ok else None

    if not ok:
        return None
    return options[0][0] if options else Required()


def classify_fields(fields: List[Field], reporter: Reporter) -> Optional[List[ClassifiedField]]:
    """Policy table for a variant, in declaration order.

    Every field is examined so all problems surface in one run; None if any
    field was rejected.
    """
    table: List[ClassifiedField] = []
    ok = True
    for fld in fields:
        policy = parse_field_policy(fld, reporter)
        if policy is None:
            ok = False
            continue
        table.append(ClassifiedField(fld, policy))
    return table if ok else None


# === Type-level options ===

@dataclass
class TypeOptions:
    visibility: str = "pub"
    lint_attrs: List[Attribute] = field(default_factory=list)


def normalize_visibility(text: str) -> Optional[str]:
    """Canonical spelling of a visibility, or None if it is not one.

    Examples:
        >>> normalize_visibility("pub( crate )")
        'pub(crate)'
        >>> normalize_visibility("")
        ''
    """
    text = " ".join(text.split())
    if not text:
        return ""
    if try_parse(text, "visibility") is None:
        return None
    return re.sub(r"\(\s*", "(", re.sub(r"\s*\)", ")", re.sub(r"pub\s*\(", "pub(", text)))


def _is_lint(meta: Meta) -> bool:
    return meta.kind == "list" and meta.path in LINT_NAMES


def _is_cfg_attr_lint(attr: Attribute) -> bool:
    if attr.path != "cfg_attr" or attr.style != "list":
        return False
    try:
        nested = parse_meta_args(attr.tokens)
    except UnexpectedInput:
        return False
    return len(nested) == 2 and _is_lint(nested[1])


def collect_lint_attrs(attrs: List[Attribute]) -> List[Attribute]:
    """Type-level lint attributes that are copied onto generated functions."""
    lints = []
    for attr in attrs:
        if attr.inner or attr.style != "list":
            continue
        if attr.path in LINT_NAMES or _is_cfg_attr_lint(attr):
            lints.append(attr)
    return lints


def parse_type_options(decl: TypeDeclaration, reporter: Reporter,
                       default_visibility: str = "pub") -> Optional[TypeOptions]:
    """Read `#[Demo(visibility = "..")]` and lint attributes from the type."""
    options = TypeOptions(visibility=default_visibility,
                          lint_attrs=collect_lint_attrs(decl.attrs))
    ok = True

    for attr in _demo_attrs(decl.attrs):
        if attr.style != "list":
            if attr.path == ATTRIBUTE_NAME:
                er.emit(reporter, er.ERR.CE2001, attr.loc)
                ok = False
            continue
        try:
            metas = parse_meta_args(attr.tokens)
        except UnexpectedInput as exc:
            er.emit(reporter, er.ERR.CE2011, attr.loc, reason=describe_parse_error(exc))
            ok = False
            continue

        for meta in metas:
            if meta.path != "visibility" or meta.kind != "name_value":
                er.emit(reporter, er.ERR.CE3002, attr.loc, key=meta.path)
                ok = False
                continue
            if not meta.is_string:
                er.emit(reporter, er.ERR.CE2006, attr.loc, key=meta.path, value=meta.value)
                ok = False
                continue
            visibility = normalize_visibility(meta.string_value())
            if visibility is None:
                er.emit(reporter, er.ERR.CE3001, attr.loc, text=meta.string_value())
                ok = False
                continue
            options.visibility = visibility

    return options if ok else None
