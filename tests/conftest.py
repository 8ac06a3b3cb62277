import pytest

from demo_derive.compiler.config import GeneratorConfig
from demo_derive.compiler.pipeline import parse_to_ast
from demo_derive.internals.report import Reporter
from demo_derive.semantics.generator import generate


def parse_decl(src):
    decls, _ = parse_to_ast(src)
    assert len(decls) == 1
    return decls[0]


def run_generator(src, **config):
    """Generate for the single declaration in `src`; returns (ctors, reporter)."""
    reporter = Reporter(source=src)
    ctors = generate(parse_decl(src), reporter, GeneratorConfig(**config))
    return ctors, reporter


@pytest.fixture
def derive():
    return run_generator


@pytest.fixture
def declaration():
    return parse_decl
