"""Tool call accuracy -- compares a transcript's tool calls to a reference list.

Supports two matching modes:
- EXACT: position-by-position comparison; extra output calls are penalized
- FLEXIBLE: bag comparison keyed by name and arguments; order is ignored

Both modes give full credit for a matching name and matching arguments
and partial credit (``name_only``) for a matching name alone.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from arbiter.evaluation.aggregation import clamp01
from arbiter.evaluation.errors import ScorerInputError
from arbiter.evaluation.scorers.base import Scorer, create_scorer
from arbiter.models.sample import ToolCall, extract_tool_calls, is_multi_turn_output

NAME = "Tool Call Accuracy"
DESCRIPTION = "Checks if the tool calls are correct"

MODES = ("exact", "flexible")

DEFAULT_WEIGHTS: dict[str, float] = {
    "exact": 1.0,
    "name_only": 0.5,
    "extra_penalty": 0.25,
    "wrong_penalty": 0.25,
}

_tool_call_list = TypeAdapter(list[ToolCall])


def stable_serialize(value: Any) -> Any:
    """Return a canonical form of *value* for order-independent comparison.

    Mapping keys are sorted recursively, lists and tuples are mapped
    element-wise, dates are rendered as ISO-8601 strings, and integral
    floats become ints so that ``1`` and ``1.0`` compare equal. Booleans
    are left as booleans and never equal a number once serialized.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): stable_serialize(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [stable_serialize(item) for item in value]
    return value


def _canonical_json(value: Any) -> str:
    return json.dumps(stable_serialize(value), sort_keys=True, default=str)


def arguments_equal(a: Any, b: Any) -> bool:
    """Structural equality of two argument payloads."""
    return _canonical_json(a) == _canonical_json(b)


def tool_call_key(call: ToolCall) -> str:
    """Canonical string identifying a call by name and arguments."""
    return _canonical_json({"tool_name": call.tool_name, "input": call.input})


def merge_weights(weights: Mapping[str, float] | None) -> dict[str, float]:
    """Overlay a partial weight mapping onto the defaults.

    ``exact`` is accepted but nominal: an exact match always earns one full
    credit, so overriding it does not change the score.

    Raises:
        ScorerInputError: On an unknown key or a negative weight.
    """
    merged = dict(DEFAULT_WEIGHTS)
    for key, value in (weights or {}).items():
        if key not in DEFAULT_WEIGHTS:
            raise ScorerInputError(
                f"Unknown tool call accuracy weight {key!r}. "
                f"Valid keys: {', '.join(DEFAULT_WEIGHTS)}"
            )
        if value < 0:
            raise ScorerInputError(f"Weight {key!r} must be non-negative")
        merged[key] = float(value)
    return merged


def validate_mode(mode: Any) -> str:
    if mode not in MODES:
        raise ScorerInputError(f"Invalid mode: {mode!r}. Must be 'exact' or 'flexible'.")
    return mode


def _dump(calls: list[ToolCall]) -> list[dict[str, Any]]:
    return [c.model_dump() for c in calls]


def categorize_pair(out: ToolCall, ref: ToolCall) -> str:
    """Classify an aligned pair as ``exact``, ``name_only`` or ``wrong``."""
    if out.tool_name != ref.tool_name:
        return "wrong"
    if ref.input is None:
        return "exact"
    if out.input is None:
        return "name_only"
    return "exact" if arguments_equal(out.input, ref.input) else "name_only"


def score_exact(
    output_calls: list[ToolCall],
    reference_calls: list[ToolCall],
    weights: Mapping[str, float],
) -> tuple[float, dict[str, Any]]:
    """Score calls position by position.

    Trailing output calls count as wrong; trailing reference calls earn no
    credit and are reported as missing.
    """
    counts: Counter[str] = Counter()
    for out, ref in zip(output_calls, reference_calls):
        counts[categorize_pair(out, ref)] += 1

    counts["wrong"] += max(0, len(output_calls) - len(reference_calls))
    missing = max(0, len(reference_calls) - len(output_calls))

    denom = max(len(reference_calls), 1)
    score = clamp01(
        (counts["exact"] + weights["name_only"] * counts["name_only"])
        / denom
        - weights["wrong_penalty"] * counts["wrong"] / denom
    )
    return score, {
        "mode": "exact",
        "exact_matches": counts["exact"],
        "name_only_matches": counts["name_only"],
        "wrong_or_missing": counts["wrong"],
        "missing": missing,
        "totals": {"reference": len(reference_calls), "output": len(output_calls)},
    }


@dataclass
class FlexibleMatch:
    """Outcome of bag-matching output calls against reference calls."""

    matches: list[ToolCall] = field(default_factory=list)
    name_only: list[ToolCall] = field(default_factory=list)
    extras: list[ToolCall] = field(default_factory=list)
    missing: list[ToolCall] = field(default_factory=list)


def match_flexible(
    output_calls: list[ToolCall], reference_calls: list[ToolCall]
) -> FlexibleMatch:
    """Match calls ignoring order.

    Exact (name and arguments) matches each consume one reference
    instance. Remaining output calls then pair one-for-one by name with
    remaining reference calls; whatever is left over is extra or missing.
    """
    remaining: dict[str, list[ToolCall]] = {}
    for ref in reference_calls:
        remaining.setdefault(tool_call_key(ref), []).append(ref)

    result = FlexibleMatch()
    leftovers: list[ToolCall] = []
    for out in output_calls:
        bucket = remaining.get(tool_call_key(out))
        if bucket:
            bucket.pop()
            result.matches.append(out)
        else:
            leftovers.append(out)

    unmatched_refs = [ref for bucket in remaining.values() for ref in bucket]
    by_name = Counter(ref.tool_name for ref in unmatched_refs)
    consumed: Counter[str] = Counter()

    for out in leftovers:
        if by_name[out.tool_name] > 0:
            by_name[out.tool_name] -= 1
            consumed[out.tool_name] += 1
            result.name_only.append(out)
        else:
            result.extras.append(out)

    for ref in unmatched_refs:
        if consumed[ref.tool_name] > 0:
            consumed[ref.tool_name] -= 1
        else:
            result.missing.append(ref)

    return result


def score_flexible(
    output_calls: list[ToolCall],
    reference_calls: list[ToolCall],
    weights: Mapping[str, float],
) -> tuple[float, dict[str, Any]]:
    """Score calls as a multiset, penalizing extras."""
    match = match_flexible(output_calls, reference_calls)
    denom = max(len(reference_calls), 1)
    score = clamp01(
        (len(match.matches) + weights["name_only"] * len(match.name_only))
        / denom
        - weights["extra_penalty"] * len(match.extras) / denom
    )
    return score, {
        "mode": "flexible",
        "exact_matches": len(match.matches),
        "name_only_matches": len(match.name_only),
        "extras": len(match.extras),
        "missing": len(match.missing),
        "totals": {"reference": len(reference_calls), "output": len(output_calls)},
        "details": {
            "matches": _dump(match.matches),
            "name_only_matches": _dump(match.name_only),
            "extras": _dump(match.extras),
            "missing_tool_calls": _dump(match.missing),
        },
    }


def _reference_calls(expected: Mapping[str, Any] | None) -> list[ToolCall]:
    raw = (expected or {}).get("reference_tool_calls")
    if raw is None:
        raise ScorerInputError(f"{NAME} scorer requires expected.reference_tool_calls")
    try:
        return _tool_call_list.validate_python(raw)
    except ValidationError as exc:
        raise ScorerInputError(f"Invalid reference_tool_calls: {exc}") from exc


def score_tool_calls(
    output_calls: list[ToolCall],
    reference_calls: list[ToolCall],
    mode: str = "exact",
    weights: Mapping[str, float] | None = None,
) -> tuple[float, dict[str, Any]]:
    """Score already-extracted tool calls; the pure core of the scorer."""
    mode = validate_mode(mode)
    merged = merge_weights(weights)

    if not reference_calls and not output_calls:
        return 1.0, {"note": "Both empty - perfect match"}
    if not reference_calls:
        return 0.0, {
            "warning": "Reference tool calls are empty but predictions exist",
            "output_count": len(output_calls),
        }
    if not output_calls:
        return 0.0, {
            "warning": "No tool calls found in output",
            "reference_count": len(reference_calls),
        }

    if mode == "exact":
        return score_exact(output_calls, reference_calls, merged)
    return score_flexible(output_calls, reference_calls, merged)


def tool_call_accuracy(
    mode: str = "exact", weights: Mapping[str, float] | None = None
) -> Scorer:
    """Build a tool call accuracy scorer.

    ``output`` must be a multi-turn transcript; reference calls come from
    ``expected["reference_tool_calls"]``. No model is called.
    """
    mode = validate_mode(mode)
    merged = merge_weights(weights)

    async def fn(
        *, input: Any, output: Any, expected: Mapping[str, Any] | None
    ) -> tuple[float, dict[str, Any]]:
        if not is_multi_turn_output(output):
            raise ScorerInputError(f"{NAME} scorer requires a multi-turn output")
        reference_calls = _reference_calls(expected)
        try:
            output_calls = extract_tool_calls(output)
        except ValidationError as exc:
            raise ScorerInputError(f"Invalid multi-turn output: {exc}") from exc
        return score_tool_calls(output_calls, reference_calls, mode, merged)

    return create_scorer(NAME, DESCRIPTION, fn)
