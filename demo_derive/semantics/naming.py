"""Constructor naming.

Structs get a constructor called `demo`; each enum variant gets
`demo_<variant in snake case>`:

    FirstVariant  -> demo_first_variant
    FreeBSD       -> demo_free_bsd
"""

from typing import Optional

CONSTRUCTOR_NAME = "demo"
RAW_PREFIX = "r#"


def to_snake_case(name: str) -> str:
    """Convert a Pascal/camel case identifier to snake case.

    An underscore goes before an upper-case letter that follows a lower-case
    letter or a digit, and before the last capital of an upper-case run that
    is followed by a lower-case letter. Existing underscores are kept as is.

    Examples:
        >>> to_snake_case("QuxBaz")
        'qux_baz'
        >>> to_snake_case("ThisISNotADrill")
        'this_is_not_a_drill'
    """
    out = []
    for i, ch in enumerate(name):
        prev = name[i - 1] if i > 0 else None
        nxt = name[i + 1] if i + 1 < len(name) else None
        if prev is not None and ch.isupper():
            if (prev.islower() or prev.isnumeric()
                    or (prev.isupper() and nxt is not None and nxt.islower())):
                out.append("_")
        out.append(ch.lower())
    return "".join(out)


def constructor_name(variant: Optional[str]) -> str:
    if variant is None:
        return CONSTRUCTOR_NAME
    # raw identifiers: `r#Type` -> `demo_type`
    return f"{CONSTRUCTOR_NAME}_{to_snake_case(variant.removeprefix(RAW_PREFIX))}"
