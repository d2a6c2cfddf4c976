"""Exception types raised by the scoring engine."""

from __future__ import annotations


class ScorerInputError(ValueError):
    """Raised before any model call when scorer inputs or options are invalid.

    Covers malformed weights or beta, missing ``expected`` fields, a
    single-turn output where multi-turn is required (or vice versa), and
    unknown mode literals.
    """


class JudgeOutputError(RuntimeError):
    """Raised when judge output cannot support the scoring that follows.

    Covers zero generated statements where at least one is required,
    verdict lists whose length differs from the statements judged, and
    provider responses that contain no parseable JSON.
    """
