# semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from demo_derive.internals.report import Span

# === Attributes ===

@dataclass
class Attribute:
    """An attribute attached to a type, variant or field.

    `tokens` holds the text inside the delimiters for list-style attributes
    (`#[Demo(into)]` → "into") and the text after `=` for name-value ones.
    """
    path: str                        # "Demo", "derive_demo::Demo", "allow", ...
    style: str = "list"              # "word" | "list" | "name_value"
    tokens: str = ""
    inner: bool = False              # True for #![...]
    loc: Optional[Span] = None

    @property
    def last_segment(self) -> str:
        return self.path.rsplit("::", 1)[-1]

    def __str__(self) -> str:
        bang = "!" if self.inner else ""
        if self.style == "list":
            return f"#{bang}[{self.path}({self.tokens})]"
        if self.style == "name_value":
            return f"#{bang}[{self.path} = {self.tokens}]"
        return f"#{bang}[{self.path}]"

# === Generics ===

@dataclass
class GenericParam:
    kind: str                        # "lifetime" | "type" | "const"
    name: str                        # includes the leading quote for lifetimes
    bounds: List[str] = field(default_factory=list)
    const_type: Optional[str] = None
    default: Optional[str] = None
    loc: Optional[Span] = None

    def __str__(self) -> str:
        if self.kind == "const":
            return f"const {self.name}: {self.const_type}"
        if self.bounds:
            return f"{self.name}: {' + '.join(self.bounds)}"
        return self.name

@dataclass
class WherePredicate:
    bounded: str                     # "T", "'a", "Vec<T>", "for<'x> F"
    bounds: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.bounded}: {' + '.join(self.bounds)}"

@dataclass
class Generics:
    params: List[GenericParam] = field(default_factory=list)
    where_clause: List[WherePredicate] = field(default_factory=list)

    def type_params(self) -> List[GenericParam]:
        return [p for p in self.params if p.kind == "type"]

    def impl_generics(self) -> str:
        if not self.params:
            return ""
        return f"<{', '.join(str(p) for p in self.params)}>"

    def ty_generics(self) -> str:
        if not self.params:
            return ""
        return f"<{', '.join(p.name for p in self.params)}>"

    def where_text(self) -> str:
        if not self.where_clause:
            return ""
        return f" where {', '.join(str(w) for w in self.where_clause)}"

# === Declarations ===

@dataclass
class Field:
    ty: str                          # type text, spliced verbatim into parameters
    name: Optional[str] = None       # None for tuple-style fields
    index: int = 0
    attrs: List[Attribute] = field(default_factory=list)
    vis: Optional[str] = None
    loc: Optional[Span] = None

    @property
    def ident(self) -> str:
        """Parameter name: the field name, or `f<index>` for tuple fields."""
        return self.name if self.name is not None else f"f{self.index}"

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else str(self.index)

@dataclass
class Variant:
    name: Optional[str]              # None for the implicit variant of a struct
    style: str = "unit"              # "named" | "tuple" | "unit"
    fields: List[Field] = field(default_factory=list)
    discriminant: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)
    loc: Optional[Span] = None

@dataclass
class TypeDeclaration:
    name: str
    kind: str = "struct"             # "struct" | "enum" | "union"
    variants: List[Variant] = field(default_factory=list)
    generics: Generics = field(default_factory=Generics)
    attrs: List[Attribute] = field(default_factory=list)
    vis: Optional[str] = None
    loc: Optional[Span] = None
    name_span: Optional[Span] = None

    @property
    def is_enum(self) -> bool:
        return self.kind == "enum"

    def derives(self, trait: str) -> bool:
        """True if a `#[derive(..)]` attribute lists `trait` (by last path segment)."""
        for attr in self.attrs:
            if attr.last_segment != "derive" or attr.style != "list":
                continue
            names = [t.strip().rsplit("::", 1)[-1] for t in attr.tokens.split(",")]
            if trait in names:
                return True
        return False

# === Generated output ===

@dataclass
class Param:
    name: str
    ty: str

    def __str__(self) -> str:
        return f"{self.name}: {self.ty}"

@dataclass
class GeneratedConstructor:
    type_name: str
    variant: Optional[str]
    name: str
    visibility: str
    doc: str
    params: List[Param]
    generics: Generics
    body: str
    lint_attrs: List[Attribute] = field(default_factory=list)
