"""
Exceptions raised by archetype alignment.

Shape and argument errors are raised before any distance or matching work is
done, so a caller can always recover from them. SolverError wraps a failure
of the external assignment backend and keeps the original as ``__cause__``.
"""


class AlignmentError(Exception):
    """Base class for every alignment failure."""


class ShapeMismatchError(AlignmentError, ValueError):
    """The two archetype sets cannot be paired (archetype counts differ)."""


class InvalidArgumentError(AlignmentError, ValueError):
    """Unknown strategy / backend name, or an unusable input value."""


class SolverError(AlignmentError, RuntimeError):
    """The assignment backend failed or returned a non-bijective matching."""
