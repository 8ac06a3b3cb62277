"""Constructor argument lists."""
from __future__ import annotations

from typing import List, Optional

from demo_derive.backend.constants import INTO_ITER_TRAIT, INTO_TRAIT
from demo_derive.semantics.ast import Param
from demo_derive.semantics.policy import ClassifiedField, Into, IntoIter, Required


def as_param(entry: ClassifiedField) -> Optional[Param]:
    """Parameter for one field, or None if the field is filled internally."""
    name = entry.field.ident
    policy = entry.policy
    if isinstance(policy, Required):
        return Param(name, entry.field.ty)
    if isinstance(policy, Into):
        return Param(name, f"impl {INTO_TRAIT}<{entry.field.ty}>")
    if isinstance(policy, IntoIter):
        return Param(name, f"impl {INTO_ITER_TRAIT}<Item = {policy.element}>")
    return None


def build_params(table: List[ClassifiedField]) -> List[Param]:
    """Parameters in field declaration order; non-argument fields are skipped."""
    params = []
    for entry in table:
        param = as_param(entry)
        if param is not None:
            params.append(param)
    return params
