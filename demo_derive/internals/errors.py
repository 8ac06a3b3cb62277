# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from demo_derive.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SYNTAX    = "syntax"
    SHAPE     = "shape"
    ATTRIBUTE = "attribute"
    OPTION    = "option"
    TARGET    = "target"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for an internal generator error.

    Internal errors (CE0xxx codes) indicate a malformed declaration tree
    handed in by the caller or a generator bug, not a problem in the user's
    annotations.

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "named field #{index} of '{type}' has no name",
    Category.INTERNAL, "Declaration tree invariant violated: named fields must carry an identifier."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "syntax error: {message}",
    Category.SYNTAX, "The declaration could not be parsed."))

# Declaration shape errors - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "#[derive(Demo)] doesn't work with unions",
    Category.SHAPE, "Only structs and enums get generated constructors."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "#[derive(Demo)] cannot be implemented for enums with zero variants",
    Category.SHAPE, "An enum without variants has nothing to construct."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "#[derive(Demo)] cannot be implemented for enums with discriminants (variant '{variant}')",
    Category.SHAPE, "Variants with explicit discriminant values are rejected."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "field '{field}' has a malformed type `{ty}`",
    Category.SHAPE, "The field type text is not a valid type expression."))

# Field annotation errors - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "invalid #[Demo] attribute, expected #[Demo(..)]",
    Category.ATTRIBUTE, "The Demo attribute takes a parenthesized argument list."))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "expected at most one #[Demo] attribute on field '{field}'",
    Category.ATTRIBUTE, "Combine all options in a single attribute."))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "invalid #[Demo] attribute: #[Demo({key})]",
    Category.ATTRIBUTE, "Recognized flags are `default` and `into`."))

_add(ErrorMessage("CE2004", Severity.ERROR,
    "invalid #[Demo] attribute: #[Demo({key} = ..)]",
    Category.ATTRIBUTE, "Recognized keys are `value` and `into_iter`."))

_add(ErrorMessage("CE2005", Severity.ERROR,
    "invalid #[Demo] attribute: #[Demo({key}(..))]",
    Category.ATTRIBUTE, "Nested argument lists are not supported."))

_add(ErrorMessage("CE2006", Severity.ERROR,
    "non-string literal value in #[Demo] attribute: {key} = {value}",
    Category.ATTRIBUTE, "Expressions and types are passed as string literals."))

_add(ErrorMessage("CE2007", Severity.ERROR,
    "invalid expression in #[Demo]: `{text}`",
    Category.ATTRIBUTE, "The value text must be a well-formed token sequence."))

_add(ErrorMessage("CE2008", Severity.ERROR,
    "invalid element type in #[Demo(into_iter = ..)]: `{text}`",
    Category.ATTRIBUTE, "The into_iter element must be a type expression."))

_add(ErrorMessage("CE2009", Severity.ERROR,
    "conflicting #[Demo] options on field '{field}': `{first}` and `{second}`",
    Category.ATTRIBUTE, "A field takes exactly one of default, value, into, into_iter."))

_add(ErrorMessage("CE2010", Severity.ERROR,
    "#[Demo({option})] on marker field '{field}' is ambiguous; marker fields are filled automatically",
    Category.ATTRIBUTE, "PhantomData fields never accept an explicit policy."))

_add(ErrorMessage("CE2011", Severity.ERROR,
    "invalid #[Demo] attribute: {reason}",
    Category.ATTRIBUTE, "The argument list could not be parsed."))

_add(ErrorMessage("CW2001", Severity.WARNING,
    "empty #[Demo()] attribute on field '{field}' has no effect",
    Category.ATTRIBUTE, "The field stays a required constructor argument."))

# Type-level option errors - CE3xxx range
_add(ErrorMessage("CE3001", Severity.ERROR,
    "invalid visibility `{text}`",
    Category.OPTION, "Use pub, pub(crate), pub(super), pub(self), pub(in path) or an empty string."))

_add(ErrorMessage("CE3002", Severity.ERROR,
    "unsupported type-level #[Demo] option `{key}`",
    Category.OPTION, "Only `visibility` can be set on the type itself."))

# Vocabulary errors - CE4xxx range
_add(ErrorMessage("CE4001", Severity.ERROR,
    "field '{field}' uses #[Demo({option})] on heap-allocated `{ty}` without std support",
    Category.TARGET, "The reduced vocabulary does not assume heap-allocating containers."))


def explain(code: str) -> str:
    """Long-form description of a catalog entry, for `--explain`.

    Raises:
        KeyError: if `code` is not in the catalog.
    """
    msg = _get(code.upper())
    return (
        f"{msg.code} ({msg.severity.value}, {msg.category.value})\n"
        f"  {msg.text}\n"
        f"\n"
        f"{msg.doc}"
    )
