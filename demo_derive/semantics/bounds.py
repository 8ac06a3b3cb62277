"""
Default-bound inference for generated constructors.

A field filled with `Default::default()` needs its type to implement
`Default`. When a type parameter is used only by such fields, the caller never
supplies a value of that type, so the constructor adds `T: Default` to its own
copy of the generics:

    struct Generic<'a, T, P> {
        x: &'a str,
        y: PhantomData<P>,
        #[Demo(default)]
        z: T,
    }

    impl<'a, T: ::core::default::Default, P> Generic<'a, T, P> { ... }

The declaration's own bounds are never modified.
"""

import copy
from typing import Dict, List, Set

from demo_derive.semantics.ast import Generics
from demo_derive.semantics.policy import ClassifiedField, Default
from demo_derive.semantics.types import is_default_bound, referenced_names

DEFAULT_BOUND = "::core::default::Default"


def usage_by_param(generics: Generics, table: List[ClassifiedField]) -> Dict[str, List[ClassifiedField]]:
    """First pass: which fields mention each type parameter."""
    usage: Dict[str, List[ClassifiedField]] = {p.name: [] for p in generics.type_params()}
    for entry in table:
        names = referenced_names(entry.field.ty)
        for param in usage:
            if param in names:
                usage[param].append(entry)
    return usage


def has_default_bound(generics: Generics, param: str) -> bool:
    for p in generics.params:
        if p.name == param and any(is_default_bound(b) for b in p.bounds):
            return True
    for pred in generics.where_clause:
        if pred.bounded == param and any(is_default_bound(b) for b in pred.bounds):
            return True
    return False


def params_needing_default(generics: Generics, table: List[ClassifiedField]) -> Set[str]:
    """Second pass: parameters used, and used only, by `Default` fields."""
    needed = set()
    for param, users in usage_by_param(generics, table).items():
        if not users:
            continue
        if all(isinstance(u.policy, Default) for u in users) and not has_default_bound(generics, param):
            needed.add(param)
    return needed


def resolve_generics(generics: Generics, table: List[ClassifiedField]) -> Generics:
    """Constructor-local copy of `generics` with inferred `Default` bounds added."""
    needed = params_needing_default(generics, table)
    resolved = copy.deepcopy(generics)
    for p in resolved.params:
        if p.name in needed:
            p.bounds.append(DEFAULT_BOUND)
    return resolved
