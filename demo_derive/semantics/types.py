"""Structural predicates over field type text.

The generator never resolves types semantically. Field types are parsed with
the shared grammar and inspected only by shape: which names a type mentions,
whether it is the zero-sized marker, whether it is a heap container.
"""

from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, Optional

from lark import Token, Tree

from demo_derive.internals.parser import try_parse


# === Type Sets ===

MARKER_TYPE_NAME = "PhantomData"

HEAP_CONTAINER_NAMES: FrozenSet[str] = frozenset({
    "Vec", "String", "Box", "Rc", "Arc",
    "HashMap", "HashSet", "BTreeMap", "BTreeSet",
    "VecDeque", "BinaryHeap", "LinkedList",
})


# === Parsing ===

@lru_cache(maxsize=1024)
def parse_type(text: str) -> Optional[Tree]:
    """Parse type text; returns the type node, or None if malformed."""
    if not text.strip():
        return None
    tree = try_parse(text, "type_expr")
    if tree is None:
        return None
    return tree.children[0]


def is_valid_type(text: str) -> bool:
    return parse_type(text) is not None


def _segment_name(segment: Tree) -> str:
    return str(segment.children[0])


def _last_segment(node: Tree) -> Optional[str]:
    """Last segment name of a plain path type, None for any other shape."""
    if not isinstance(node, Tree) or node.data != "type_path":
        return None
    segments = [c for c in node.children if isinstance(c, Tree) and c.data == "path_segment"]
    return _segment_name(segments[-1]) if segments else None


# === Type Predicates ===

def referenced_names(text: str) -> FrozenSet[str]:
    """Names a type refers to as the head of a relative path.

    `Vec<&'a T>` → {"Vec", "T"}; `T::Item` → {"T"}; `::std::vec::Vec<U>` → {"U"}.
    Generic parameters always appear as such a head, so intersecting the
    result with a declaration's type parameters yields the ones a field uses.

    Examples:
        >>> sorted(referenced_names("HashMap<K, Vec<V>>"))
        ['HashMap', 'K', 'V', 'Vec']
    """
    node = parse_type(text)
    if node is None:
        return frozenset()
    names = set()
    for path in node.iter_subtrees():
        if path.data != "type_path":
            continue
        head = path.children[0]
        if isinstance(head, Token) and head.type == "PATH_SEP":
            continue
        names.add(_segment_name(head))
    return frozenset(names)


def is_marker_type(text: str) -> bool:
    """Check if a field type has the zero-sized marker shape.

    Matches any plain path whose last segment is `PhantomData`, whatever the
    prefix: `PhantomData<T>`, `std::marker::PhantomData<T>`,
    `::core::marker::PhantomData<fn() -> T>`. Qualified paths never match.

    This is a heuristic on the spelling of the last segment: a user-defined
    type that happens to be called `PhantomData` is treated as the marker.

    Examples:
        >>> is_marker_type("std::marker::PhantomData<T>")
        True
        >>> is_marker_type("Vec<PhantomData<T>>")
        False
    """
    return _last_segment(parse_type(text)) == MARKER_TYPE_NAME


def is_heap_container(text: str) -> bool:
    """Check if a type's outermost path names a heap-allocating container.

    Examples:
        >>> is_heap_container("Vec<u8>")
        True
        >>> is_heap_container("[u8; 4]")
        False
    """
    return _last_segment(parse_type(text)) in HEAP_CONTAINER_NAMES


def is_default_bound(text: str) -> bool:
    """True for `Default`, `std::default::Default`, `::core::default::Default`."""
    node = parse_type(text)
    if node is None:
        return False
    return _last_segment(node) == "Default"
