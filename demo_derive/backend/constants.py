"""Fully qualified paths spliced into generated code.

All paths are rooted at `::core`, which resolves both with and without the
standard library.
"""

DEFAULT_CALL = "::core::default::Default::default()"
INTO_TRAIT = "::core::convert::Into"
INTO_FN = "::core::convert::Into::into"
INTO_ITER_TRAIT = "::core::iter::IntoIterator"
INTO_ITER_FN = "::core::iter::IntoIterator::into_iter"
COLLECT_FN = "::core::iter::Iterator::collect"
MARKER_VALUE = "::core::marker::PhantomData"
