"""Source file → generated `impl` blocks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lark import Tree, UnexpectedInput

from demo_derive.backend.emit import render_all
from demo_derive.compiler.config import GeneratorConfig
from demo_derive.internals import errors as er
from demo_derive.internals.parser import describe_parse_error, parse_items
from demo_derive.internals.report import Reporter, Span
from demo_derive.semantics.ast import GeneratedConstructor, TypeDeclaration
from demo_derive.semantics.ast_builder import ASTBuilder
from demo_derive.semantics.generator import generate

DERIVE_NAME = "Demo"


@dataclass
class GenerationResult:
    reporter: Reporter
    declarations: List[TypeDeclaration] = field(default_factory=list)
    constructors: List[GeneratedConstructor] = field(default_factory=list)
    output: str = ""

    @property
    def exit_code(self) -> int:
        if self.reporter.has_errors:
            return 2
        if self.reporter.has_warnings:
            return 1
        return 0


def parse_to_ast(src: str, dump_parse: bool = False) -> Tuple[List[TypeDeclaration], Tree]:
    tree = parse_items(src, dump_parse=dump_parse)
    return ASTBuilder(src).build(tree), tree


def _error_span(e: UnexpectedInput) -> Optional[Span]:
    line = getattr(e, "line", None)
    col = getattr(e, "column", None)
    if line in (None, -1) or col in (None, -1):
        return None
    return Span(line, col, line, col)


def process_source(src: str, filename: str = "<input>",
                   config: Optional[GeneratorConfig] = None,
                   dump_parse: bool = False, dump_ast: bool = False) -> GenerationResult:
    """Run the generator on every declaration deriving `Demo`.

    A declaration that fails produces no output; the others are still
    generated. A syntax error stops processing of the whole file.
    """
    config = config or GeneratorConfig()
    result = GenerationResult(reporter=Reporter(source=src, filename=filename))

    try:
        decls, _ = parse_to_ast(src, dump_parse=dump_parse)
    except UnexpectedInput as e:
        er.emit(result.reporter, er.ERR.CE0002, _error_span(e), message=describe_parse_error(e))
        return result

    if dump_ast:
        for decl in decls:
            print(decl)
        print()

    result.declarations = decls
    for decl in decls:
        if not decl.derives(DERIVE_NAME):
            continue
        ctors = generate(decl, result.reporter, config)
        if ctors is not None:
            result.constructors.extend(ctors)

    if result.constructors:
        result.output = render_all(result.constructors) + "\n"
    return result
