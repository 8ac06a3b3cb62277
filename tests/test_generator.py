import copy

import pytest

from demo_derive.compiler.config import GeneratorConfig
from demo_derive.internals.report import Reporter
from demo_derive.semantics.ast import Field, TypeDeclaration, Variant
from demo_derive.semantics.generator import generate


def test_struct_constructor(derive):
    ctors, reporter = derive("""
        #[derive(Demo)]
        struct Foo {
            x: u32,
            #[Demo(default)]
            y: String,
        }
    """)
    assert not reporter.items
    (ctor,) = ctors
    assert ctor.name == "demo"
    assert ctor.visibility == "pub"
    assert ctor.doc == "Constructs a demo `Foo`."
    assert [str(p) for p in ctor.params] == ["x: u32"]
    assert ctor.body == "Foo { x: x, y: ::core::default::Default::default() }"


def test_one_constructor_per_variant(derive):
    ctors, reporter = derive("""
        enum Shape {
            Circle { r: f64 },
            Pair(u8, #[Demo(into)] String),
            Empty,
            FreeBSD,
        }
    """)
    assert not reporter.items
    assert [c.name for c in ctors] == ["demo_circle", "demo_pair", "demo_empty", "demo_free_bsd"]
    assert [c.body for c in ctors] == [
        "Shape::Circle { r: r }",
        "Shape::Pair(f0, ::core::convert::Into::into(f1))",
        "Shape::Empty",
        "Shape::FreeBSD",
    ]
    assert ctors[1].doc == "Constructs a demo `Shape::Pair`."


def test_params_are_parameter_bearing_fields_in_order(derive):
    ctors, _ = derive("""
        struct S {
            #[Demo(value = "1")] a: u8,
            b: u8,
            m: PhantomData<u8>,
            #[Demo(into)] c: String,
            #[Demo(default)] d: u8,
            #[Demo(into_iter = "u8")] e: Vec<u8>,
        }
    """)
    assert [p.name for p in ctors[0].params] == ["b", "c", "e"]


def test_body_covers_every_field_in_order(derive):
    ctors, _ = derive("struct S { c: u8, #[Demo(default)] a: u8, m: PhantomData<u8>, b: u8 }")
    assert ctors[0].body == (
        "S { c: c, a: ::core::default::Default::default(), "
        "m: ::core::marker::PhantomData, b: b }"
    )


def test_raw_identifier_variants(derive):
    ctors, reporter = derive("enum Token { r#Type, r#Match(u8) }")
    assert not reporter.items
    assert [c.name for c in ctors] == ["demo_type", "demo_match"]
    assert [c.body for c in ctors] == ["Token::r#Type", "Token::r#Match(f0)"]


def test_comments_do_not_leak_into_generated_code(derive):
    ctors, reporter = derive("""
        struct S {
            #[Demo(value = "1 // one")] a: u8,
            b: HashMap<
                String, // key
                u8,
            >,
        }
    """)
    assert not reporter.items
    (ctor,) = ctors
    assert [str(p) for p in ctor.params] == ["b: HashMap< String, u8, >"]
    assert ctor.body == "S { a: 1, b: b }"


def test_generic_default_bound(derive):
    ctors, _ = derive("""
        struct Generic<'a, T, P> {
            x: &'a str,
            y: PhantomData<P>,
            #[Demo(default)]
            z: T,
        }
    """)
    assert ctors[0].generics.impl_generics() == "<'a, T: ::core::default::Default, P>"
    assert [str(p) for p in ctors[0].params] == ["x: &'a str"]


def test_bounds_resolved_per_variant(derive):
    ctors, _ = derive("enum E<T> { A(#[Demo(default)] T), B(T) }")
    assert ctors[0].generics.impl_generics() == "<T: ::core::default::Default>"
    assert ctors[1].generics.impl_generics() == "<T>"


def test_generation_is_repeatable(declaration):
    decl = declaration("struct G<T> { #[Demo(default)] t: T, #[Demo(into)] s: String }")
    before = copy.deepcopy(decl)
    first = generate(decl, Reporter())
    second = generate(decl, Reporter())
    assert first == second
    assert decl == before


@pytest.mark.parametrize("src, code", [
    ("union U { a: u8, b: u16 }", "CE1001"),
    ("enum Never {}", "CE1002"),
])
def test_rejected_shapes(derive, src, code):
    ctors, reporter = derive(src)
    assert ctors is None
    assert reporter.codes() == [code]


def test_discriminants_are_reported_per_variant(derive):
    ctors, reporter = derive("enum D { A = 1, B, C = 1 << 2 }")
    assert ctors is None
    assert reporter.codes() == ["CE1003", "CE1003"]
    assert "'A'" in reporter.items[0].message


def test_all_or_nothing(derive):
    ctors, reporter = derive("""
        enum E {
            Good(u8),
            Bad(#[Demo(default, into)] u8),
        }
    """)
    assert ctors is None
    assert reporter.codes() == ["CE2009"]


def test_every_error_is_reported(derive):
    ctors, reporter = derive("""
        #[Demo(visibility = "everyone")]
        struct S {
            #[Demo(nope)] a: u8,
            #[Demo(default)] m: PhantomData<u8>,
        }
    """)
    assert ctors is None
    assert reporter.codes() == ["CE3001", "CE2003", "CE2010"]


def test_warnings_do_not_block_generation(derive):
    ctors, reporter = derive("struct S { #[Demo()] a: u8 }")
    assert [str(p) for p in ctors[0].params] == ["a: u8"]
    assert reporter.has_warnings
    assert not reporter.has_errors


def test_visibility_from_config_and_type(derive):
    ctors, _ = derive("struct S;", visibility="pub(crate)")
    assert ctors[0].visibility == "pub(crate)"
    ctors, _ = derive('#[Demo(visibility = "pub(super)")] struct S;', visibility="pub(crate)")
    assert ctors[0].visibility == "pub(super)"


def test_lint_attributes_are_propagated(derive):
    ctors, _ = derive("#[allow(clippy::new_ret_no_self)] enum E { A, B }")
    assert [str(a) for c in ctors for a in c.lint_attrs] == [
        "#[allow(clippy::new_ret_no_self)]",
    ] * 2


def test_reduced_vocabulary_rejects_heap_containers(derive):
    src = """
        struct S {
            #[Demo(default)] v: Vec<u8>,
            #[Demo(into_iter = "u8")] w: Vec<u8>,
            #[Demo(default)] n: u32,
            #[Demo(into)] s: String,
        }
    """
    ctors, reporter = derive(src, std=False)
    assert ctors is None
    assert reporter.codes() == ["CE4001", "CE4001"]

    ctors, reporter = derive(src)
    assert ctors is not None
    assert not reporter.items


def test_reduced_vocabulary_accepts_core_types(derive):
    ctors, reporter = derive(
        'struct S { #[Demo(default)] n: u32, #[Demo(into_iter = "u8")] a: [u8; 4] }',
        std=False,
    )
    assert ctors is not None
    assert not reporter.items


def test_malformed_field_type_is_reported():
    decl = TypeDeclaration(name="S", variants=[
        Variant(name=None, style="named", fields=[Field(ty="Vec<", name="v")]),
    ])
    reporter = Reporter()
    assert generate(decl, reporter, GeneratorConfig()) is None
    assert reporter.codes() == ["CE1004"]


def test_named_field_without_name_is_internal_error():
    decl = TypeDeclaration(name="S", variants=[
        Variant(name=None, style="named", fields=[Field(ty="u8")]),
    ])
    with pytest.raises(RuntimeError, match="CE0001"):
        generate(decl, Reporter())
