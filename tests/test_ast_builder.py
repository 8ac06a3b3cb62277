import pytest
from lark import UnexpectedInput

from demo_derive.compiler.pipeline import parse_to_ast


def test_struct_shapes(declaration):
    named = declaration("pub struct N { pub a: u8, pub(crate) b: Vec<u8> }")
    assert named.kind == "struct"
    assert named.vis == "pub"
    (variant,) = named.variants
    assert variant.name is None
    assert variant.style == "named"
    assert [(f.name, f.ty, f.vis) for f in variant.fields] == [
        ("a", "u8", "pub"), ("b", "Vec<u8>", "pub(crate)"),
    ]

    tuple_ = declaration("struct T(u8, &'static str);")
    assert tuple_.variants[0].style == "tuple"
    assert [(f.ident, f.ty) for f in tuple_.variants[0].fields] == [
        ("f0", "u8"), ("f1", "&'static str"),
    ]

    assert declaration("struct U;").variants[0].style == "unit"


def test_enum_variants(declaration):
    decl = declaration("""
        enum E {
            #[doc = "first"]
            A { x: i32 },
            B(u8),
            C,
            D = 4,
        }
    """)
    assert decl.is_enum
    assert [(v.name, v.style) for v in decl.variants] == [
        ("A", "named"), ("B", "tuple"), ("C", "unit"), ("D", "unit"),
    ]
    assert [a.path for a in decl.variants[0].attrs] == ["doc"]
    assert decl.variants[3].discriminant == "4"


def test_generics(declaration):
    decl = declaration("""
        struct A<'a: 'b, 'b, T: Debug + ?Sized = u8, const N: usize = 3>
        where
            T: Clone,
            'b: 'a,
            for<'x> &'x T: PartialEq,
        {
            t: &'a T,
        }
    """)
    g = decl.generics
    assert [str(p) for p in g.params] == ["'a: 'b", "'b", "T: Debug + ?Sized", "const N: usize"]
    assert [p.default for p in g.params] == [None, None, "u8", "3"]
    assert g.impl_generics() == "<'a: 'b, 'b, T: Debug + ?Sized, const N: usize>"
    assert g.ty_generics() == "<'a, 'b, T, N>"
    assert g.where_text() == " where T: Clone, 'b: 'a, for<'x> &'x T: PartialEq"


def test_type_text_collapses_whitespace(declaration):
    decl = declaration("struct S { m: HashMap<\n    K,\n    V,\n> }")
    assert decl.variants[0].fields[0].ty == "HashMap< K, V, >"


def test_comments_inside_types_are_dropped(declaration):
    decl = declaration("""
        struct S<T>
        where
            Vec<T>: // needs cloning
                Clone,
        {
            map: HashMap<
                String, // key
                u8, /* value */
            >,
        }
    """)
    assert decl.variants[0].fields[0].ty == "HashMap< String, u8, >"
    assert decl.generics.where_text() == " where Vec<T>: Clone"


def test_attributes(declaration):
    decl = declaration("""
        #[derive(Debug, Demo)]
        #[doc = "A thing."]
        #[non_exhaustive]
        struct S;
    """)
    assert [(a.path, a.style, a.tokens) for a in decl.attrs] == [
        ("derive", "list", "Debug, Demo"),
        ("doc", "name_value", '"A thing."'),
        ("non_exhaustive", "word", ""),
    ]
    assert decl.derives("Demo")
    assert not decl.derives("Clone")


def test_qualified_derive_path(declaration):
    assert declaration("#[derive(derive_demo::Demo)] struct S;").derives("Demo")


def test_comments_and_inner_attributes_are_skipped():
    decls, _ = parse_to_ast("""
        #![allow(unused)]
        // line comment
        /* block
           comment */
        struct A;
        /// doc comment
        enum B { X }
    """)
    assert [d.name for d in decls] == ["A", "B"]


def test_locations(declaration):
    decl = declaration("\n\nstruct S {\n    a: u8,\n}")
    assert decl.name_span.line == 3
    assert decl.variants[0].fields[0].loc.line == 4


def test_syntax_error():
    with pytest.raises(UnexpectedInput):
        parse_to_ast("struct S { a u8 }")


def test_other_items_are_skipped():
    decls, _ = parse_to_ast("""
        use std::marker::PhantomData;
        use std::{collections::HashMap, fmt};

        const LIMIT: usize = 3;
        static NAMES: [&str; 2] = ["a", "b"];
        type Alias<T> = Vec<T>;

        fn main() {
            let s = S { a: 1 };
        }

        pub(crate) trait Shape: Clone { fn area(&self) -> f64; }

        impl<T> Wrapper<T> where T: Clone {
            pub fn get(&self) -> &T { &self.0 }
        }

        #[cfg(test)]
        mod tests { use super::*; }

        macro_rules! noop { () => {}; }
        noop!();

        #[derive(Demo)]
        struct Wrapper<T>(T, PhantomData<T>);

        enum Tail { A }
    """)
    assert [d.name for d in decls] == ["Wrapper", "Tail"]
    assert decls[0].derives("Demo")
