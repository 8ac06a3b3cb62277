from demo_derive.internals.report import Reporter
from demo_derive.semantics.bounds import (
    DEFAULT_BOUND,
    params_needing_default,
    resolve_generics,
    usage_by_param,
)
from demo_derive.semantics.policy import classify_fields


def classify(decl, variant=0):
    return classify_fields(decl.variants[variant].fields, Reporter())


GENERIC = """
    struct Generic<'a, T, P> {
        x: &'a str,
        y: PhantomData<P>,
        #[Demo(default)]
        z: T,
    }
"""


def test_usage_by_param(declaration):
    decl = declaration(GENERIC)
    usage = usage_by_param(decl.generics, classify(decl))
    assert [u.field.name for u in usage["T"]] == ["z"]
    assert [u.field.name for u in usage["P"]] == ["y"]
    assert "'a" not in usage


def test_default_only_parameter_gets_bound(declaration):
    decl = declaration(GENERIC)
    resolved = resolve_generics(decl.generics, classify(decl))
    assert resolved.impl_generics() == f"<'a, T: {DEFAULT_BOUND}, P>"
    assert resolved.ty_generics() == "<'a, T, P>"


def test_declaration_generics_are_untouched(declaration):
    decl = declaration(GENERIC)
    resolve_generics(decl.generics, classify(decl))
    assert decl.generics.impl_generics() == "<'a, T, P>"


def test_existing_inline_bound_is_respected(declaration):
    decl = declaration("struct S<T: Clone + Default> { #[Demo(default)] t: T }")
    assert params_needing_default(decl.generics, classify(decl)) == set()


def test_existing_where_bound_is_respected(declaration):
    decl = declaration("struct S<T> where T: std::default::Default { #[Demo(default)] t: T }")
    assert params_needing_default(decl.generics, classify(decl)) == set()


def test_where_bound_on_other_type_does_not_count(declaration):
    decl = declaration("struct S<T> where Vec<T>: Default { #[Demo(default)] t: T }")
    assert params_needing_default(decl.generics, classify(decl)) == {"T"}


def test_parameter_also_used_by_argument_is_untouched(declaration):
    decl = declaration("struct S<T> { a: T, #[Demo(default)] b: Vec<T> }")
    assert params_needing_default(decl.generics, classify(decl)) == set()


def test_value_and_marker_users_block_the_bound(declaration):
    decl = declaration("""
        struct S<A, B> {
            #[Demo(value = "None")] a: Option<A>,
            #[Demo(default)] b: Option<B>,
            m: PhantomData<B>,
        }
    """)
    assert params_needing_default(decl.generics, classify(decl)) == set()


def test_unused_parameter_is_untouched(declaration):
    decl = declaration("struct S<T, U> { #[Demo(default)] t: T }")
    assert params_needing_default(decl.generics, classify(decl)) == {"T"}


def test_nested_reference_counts(declaration):
    decl = declaration("struct S<K, V> { #[Demo(default)] map: HashMap<K, Vec<V>> }")
    assert params_needing_default(decl.generics, classify(decl)) == {"K", "V"}


def test_analysis_is_per_variant(declaration):
    decl = declaration("enum E<T> { A(#[Demo(default)] T), B(T) }")
    assert params_needing_default(decl.generics, classify(decl, 0)) == {"T"}
    assert params_needing_default(decl.generics, classify(decl, 1)) == set()
