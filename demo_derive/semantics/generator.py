"""
Constructor generation for one type declaration.

Stages, per declaration:

    1. shape checks        unions, empty enums, discriminants
    2. type options        #[Demo(visibility = "..")], lint attributes
    3. field policies      one policy table per variant
    4. vocabulary check    heap containers without std support
    5. construction        bounds, name, arguments, body per variant

Generation is all-or-nothing: stages 1-4 report every problem they find, and
if any error was reported for the declaration no constructor is produced.
"""
from __future__ import annotations

from typing import List, Optional

from demo_derive.backend.arguments import build_params
from demo_derive.backend.body import build_body
from demo_derive.compiler.config import GeneratorConfig
from demo_derive.internals import errors as er
from demo_derive.internals.report import Reporter
from demo_derive.semantics.ast import GeneratedConstructor, TypeDeclaration, Variant
from demo_derive.semantics.bounds import resolve_generics
from demo_derive.semantics.naming import constructor_name
from demo_derive.semantics.policy import (
    ClassifiedField,
    Default,
    IntoIter,
    TypeOptions,
    classify_fields,
    describe,
    parse_type_options,
)
from demo_derive.semantics.types import is_heap_container, is_valid_type


def _check_shape(decl: TypeDeclaration, reporter: Reporter) -> bool:
    if decl.kind == "union":
        er.emit(reporter, er.ERR.CE1001, decl.name_span or decl.loc)
        return False
    if decl.is_enum and not decl.variants:
        er.emit(reporter, er.ERR.CE1002, decl.name_span or decl.loc)
        return False
    ok = True
    for variant in decl.variants:
        if variant.discriminant is not None:
            er.emit(reporter, er.ERR.CE1003, variant.loc, variant=variant.name)
            ok = False
    return ok


def _check_fields(decl: TypeDeclaration, variant: Variant, reporter: Reporter) -> None:
    for fld in variant.fields:
        if variant.style == "named" and fld.name is None:
            er.raise_internal_error("CE0001", index=fld.index, type=decl.name)
        if not is_valid_type(fld.ty):
            er.emit(reporter, er.ERR.CE1004, fld.loc, field=fld.display_name, ty=fld.ty)


def _check_vocabulary(table: List[ClassifiedField], reporter: Reporter) -> None:
    """Without std, `default`/`into_iter` may not target heap containers."""
    for entry in table:
        if isinstance(entry.policy, (Default, IntoIter)) and is_heap_container(entry.field.ty):
            er.emit(reporter, er.ERR.CE4001, entry.field.loc,
                    field=entry.field.display_name,
                    option=describe(entry.policy), ty=entry.field.ty)


def doc_text(decl: TypeDeclaration, variant: Variant) -> str:
    if variant.name is None:
        return f"Constructs a demo `{decl.name}`."
    return f"Constructs a demo `{decl.name}::{variant.name}`."


def build_constructor(decl: TypeDeclaration, variant: Variant,
                      table: List[ClassifiedField], options: TypeOptions) -> GeneratedConstructor:
    return GeneratedConstructor(
        type_name=decl.name,
        variant=variant.name,
        name=constructor_name(variant.name),
        visibility=options.visibility,
        doc=doc_text(decl, variant),
        params=build_params(table),
        generics=resolve_generics(decl.generics, table),
        body=build_body(decl.name, variant.name, variant.style, table),
        lint_attrs=list(options.lint_attrs),
    )


def generate(decl: TypeDeclaration, reporter: Reporter,
             config: Optional[GeneratorConfig] = None) -> Optional[List[GeneratedConstructor]]:
    """Constructors for every variant of `decl`, in declaration order.

    Returns None when any error was reported for this declaration. Warnings
    do not block generation.

    Raises:
        RuntimeError: if a named field carries no name (malformed input tree).
    """
    config = config or GeneratorConfig()
    errors_before = reporter.error_count

    if not _check_shape(decl, reporter):
        return None

    options = parse_type_options(decl, reporter, default_visibility=config.visibility)

    tables: List[Optional[List[ClassifiedField]]] = []
    for variant in decl.variants:
        _check_fields(decl, variant, reporter)
        table = classify_fields(variant.fields, reporter)
        if table is not None and not config.std:
            _check_vocabulary(table, reporter)
        tables.append(table)

    if options is None or reporter.error_count > errors_before:
        return None

    return [build_constructor(decl, variant, table, options)
            for variant, table in zip(decl.variants, tables)]
