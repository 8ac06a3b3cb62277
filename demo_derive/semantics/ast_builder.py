"""Build declaration dataclasses from Lark parse trees.

Type and bound text is the source slice with comments dropped and whitespace
runs collapsed. Attribute arguments are kept exactly as written.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Union

from lark import Token, Tree

from demo_derive.internals.parser import normalize_tokens
from demo_derive.internals.report import span_of
from demo_derive.semantics.ast import (
    Attribute, Field, GenericParam, Generics, TypeDeclaration, Variant, WherePredicate,
)

Child = Union[Tree, Token]

STRUCT_SHAPES = {
    "named_struct": "named",
    "tuple_struct": "tuple",
    "unit_struct": "unit",
}


# ------------------------
# Tree navigation
# ------------------------

def first_tree(children: Iterable[Child], data: str) -> Optional[Tree]:
    for c in children:
        if isinstance(c, Tree) and c.data == data:
            return c
    return None


def all_trees(children: Iterable[Child], data: str) -> List[Tree]:
    return [c for c in children if isinstance(c, Tree) and c.data == data]


def first_token(children: Iterable[Child], type_: str) -> Optional[Token]:
    for c in children:
        if isinstance(c, Token) and c.type == type_:
            return c
    return None


def last_tree(children: List[Child]) -> Tree:
    trees = [c for c in children if isinstance(c, Tree)]
    assert trees, "expected at least one subtree"
    return trees[-1]


# ------------------------
# AST Builder
# ------------------------

class ASTBuilder:
    def __init__(self, source: str):
        self.source = source

    def text(self, node: Child) -> str:
        if isinstance(node, Token):
            return str(node)
        return normalize_tokens(self.source[node.meta.start_pos:node.meta.end_pos])

    def build(self, tree: Tree) -> List[TypeDeclaration]:
        assert tree.data == "items"
        decls = []
        for item in all_trees(tree.children, "item"):
            if last_tree(item.children).data == "other_item":
                continue
            decls.append(self.build_item(item))
        return decls

    # --- items

    def build_item(self, t: Tree) -> TypeDeclaration:
        attrs = self.build_attrs(first_tree(t.children, "attrs"))
        vis_node = first_tree(t.children, "vis")
        body = last_tree(t.children)

        name_tok = first_token(body.children, "NAME")
        decl = TypeDeclaration(
            name=str(name_tok),
            generics=self.build_generics(body),
            attrs=attrs,
            vis=self.text(vis_node) if vis_node is not None else None,
            loc=span_of(t),
            name_span=span_of(name_tok),
        )

        if body.data in STRUCT_SHAPES:
            decl.kind = "struct"
            decl.variants = [self.build_variant_body(None, STRUCT_SHAPES[body.data], body, [])]
        elif body.data == "union_item":
            decl.kind = "union"
            decl.variants = [self.build_variant_body(None, "named", body, [])]
        elif body.data == "enum_item":
            decl.kind = "enum"
            decl.variants = [self.build_variant(v) for v in all_trees(body.children, "variant")]
        else:
            raise NotImplementedError(f"item: unexpected body '{body.data}'")
        return decl

    def build_variant(self, t: Tree) -> Variant:
        name_tok = first_token(t.children, "NAME")
        named = first_tree(t.children, "named_fields")
        tuple_ = first_tree(t.children, "tuple_fields")
        style = "named" if named is not None else "tuple" if tuple_ is not None else "unit"
        variant = self.build_variant_body(str(name_tok), style, t,
                                          self.build_attrs(first_tree(t.children, "attrs")))
        disc = first_tree(t.children, "discriminant")
        if disc is not None:
            variant.discriminant = self.text(disc)[1:].strip()
        return variant

    def build_variant_body(self, name: Optional[str], style: str, t: Tree,
                           attrs: List[Attribute]) -> Variant:
        fields: List[Field] = []
        if style == "named":
            for i, f in enumerate(all_trees(first_tree(t.children, "named_fields").children, "named_field")):
                fields.append(self.build_field(f, i, named=True))
        elif style == "tuple":
            for i, f in enumerate(all_trees(first_tree(t.children, "tuple_fields").children, "tuple_field")):
                fields.append(self.build_field(f, i, named=False))
        return Variant(name=name, style=style, fields=fields, attrs=attrs, loc=span_of(t))

    def build_field(self, t: Tree, index: int, named: bool) -> Field:
        vis_node = first_tree(t.children, "vis")
        name_tok = first_token(t.children, "NAME") if named else None
        return Field(
            ty=self.text(last_tree(t.children)),
            name=str(name_tok) if name_tok is not None else None,
            index=index,
            attrs=self.build_attrs(first_tree(t.children, "attrs")),
            vis=self.text(vis_node) if vis_node is not None else None,
            loc=span_of(t),
        )

    # --- attributes

    def build_attrs(self, t: Optional[Tree]) -> List[Attribute]:
        if t is None:
            return []
        return [self.build_attr(a) for a in all_trees(t.children, "outer_attr")]

    def build_attr(self, t: Tree) -> Attribute:
        path = "".join(str(tok) for tok in first_tree(t.children, "simple_path").children)
        attr = Attribute(path=path, style="word", inner=t.data == "inner_attr", loc=span_of(t))
        delim = first_tree(t.children, "delim_tree")
        value = first_tree(t.children, "attr_value")
        if delim is not None:
            attr.style = "list"
            attr.tokens = self.source[delim.meta.start_pos + 1:delim.meta.end_pos - 1].strip()
        elif value is not None:
            attr.style = "name_value"
            raw = self.source[value.meta.start_pos:value.meta.end_pos]
            attr.tokens = raw[1:].strip()
        return attr

    # --- generics

    def build_generics(self, body: Tree) -> Generics:
        generics = Generics()
        params = first_tree(body.children, "generic_params")
        if params is not None:
            generics.params = [self.build_generic_param(p) for p in params.children
                               if isinstance(p, Tree)]
        where = first_tree(body.children, "where_clause")
        if where is not None:
            generics.where_clause = [self.build_where_pred(p) for p in where.children
                                     if isinstance(p, Tree)]
        return generics

    def lifetime_bounds(self, t: Optional[Tree]) -> List[str]:
        if t is None:
            return []
        return [str(tok) for tok in t.children]

    def bounds(self, t: Optional[Tree]) -> List[str]:
        if t is None:
            return []
        return [self.text(b) for b in t.children if isinstance(b, Tree)]

    def build_generic_param(self, t: Tree) -> GenericParam:
        loc = span_of(t)
        if t.data == "lifetime_param":
            return GenericParam(
                kind="lifetime",
                name=str(first_token(t.children, "LIFETIME")),
                bounds=self.lifetime_bounds(first_tree(t.children, "lifetime_bounds")),
                loc=loc,
            )
        if t.data == "type_param":
            rest = [c for c in t.children
                    if isinstance(c, Tree) and c.data not in ("attrs", "bounds")]
            return GenericParam(
                kind="type",
                name=str(first_token(t.children, "NAME")),
                bounds=self.bounds(first_tree(t.children, "bounds")),
                default=self.text(rest[0]) if rest else None,
                loc=loc,
            )
        if t.data == "const_param":
            rest = [c for c in t.children if isinstance(c, Tree) and c.data != "attrs"]
            default = first_tree(rest, "const_value")
            return GenericParam(
                kind="const",
                name=str(first_token(t.children, "NAME")),
                const_type=self.text(rest[0]),
                default=self.text(default) if default is not None else None,
                loc=loc,
            )
        raise NotImplementedError(f"generic_params: unexpected node '{t.data}'")

    def build_where_pred(self, t: Tree) -> WherePredicate:
        if t.data == "lifetime_pred":
            return WherePredicate(
                bounded=str(first_token(t.children, "LIFETIME")),
                bounds=self.lifetime_bounds(first_tree(t.children, "lifetime_bounds")),
            )
        if t.data == "type_pred":
            trees = [c for c in t.children if isinstance(c, Tree) and c.data != "bounds"]
            bounded = " ".join(self.text(c) for c in trees)
            return WherePredicate(bounded=bounded,
                                  bounds=self.bounds(first_tree(t.children, "bounds")))
        raise NotImplementedError(f"where_clause: unexpected node '{t.data}'")
