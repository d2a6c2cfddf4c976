"""Result-style wrapper for judge calls whose failure a scorer tolerates.

Scorers that declare a soft-failure policy await judge calls through
``attempt``, which captures an exception instead of raising it. The
scorer then decides explicitly what a failed call contributes. Scorers
without such a policy call the judge directly and let errors propagate.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class JudgeOutcome(Generic[T]):
    """Either a value or the exception raised while producing it."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, re-raising the captured error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def attempt(call: Awaitable[T]) -> JudgeOutcome[T]:
    """Await *call*, capturing any exception as a failed outcome."""
    try:
        return JudgeOutcome(value=await call)
    except Exception as exc:
        return JudgeOutcome(error=exc)
