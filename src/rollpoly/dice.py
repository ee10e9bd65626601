from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from .evaluator import evaluate
from .formatting import format_expression
from .models import RollOutput
from .parser import parse
from .random_source import RandomSource, SystemRandomSource


NOTATION_EXAMPLES: dict[str, list[tuple[str, str]]] = {
    "Basic dice rolls": [
        ("1d6", "Roll one 6-sided die"),
        ("4d10", "Roll four 10-sided dice"),
        ("d20", "Roll one 20-sided die (implicit count)"),
    ],
    "Arithmetic (strictly left to right)": [
        ("3d6 + 5", "Roll 3d6 and add 5"),
        ("2d20 - 3", "Roll 2d20 and subtract 3"),
        ("1d4 * 2", "Roll 1d4 and multiply the sum by 2"),
        ("5d6 / 3", "Divide the sum by 3, truncating toward zero"),
        ("4d8 // 3", "Divide the sum by 3, rounding down"),
        ("2d12 + 1d6", "Combine two dice pools"),
    ],
    "Keep highest (K) and keep lowest (k)": [
        ("4d6K3", "Keep the highest 3 of 4d6"),
        ("2d20K", "Advantage: keep the highest d20"),
        ("2d20k", "Disadvantage: keep the lowest d20"),
        ("5d6k3", "Keep the lowest 3 of 5d6"),
    ],
    "Drop highest (X) and drop lowest (x)": [
        ("6d8X", "Drop the highest of 6d8"),
        ("5d10x3", "Drop the lowest 3 of 5d10"),
        ("4d6x", "Character generation: drop the lowest"),
    ],
    "Count successes (> or <) and failures (f)": [
        ("5d10>7", "Count rolls above 7"),
        ("8d6<3", "Count rolls below 3"),
        ("10d10>6f<3", "Successes above 6 minus failures below 3"),
    ],
    "Exploding dice (!)": [
        ("2d6!", "Roll another die for every 6"),
        ("3d10!10", "Explode on 10s"),
        ("d20!>15", "Explode on 16 or more"),
    ],
    "Rerolling dice (r once, R until it sticks)": [
        ("4d6r1", "Reroll 1s once"),
        ("2d6r<3", "Reroll anything under 3 once"),
        ("3d8R1", "Keep rerolling 1s"),
        ("4d6r1r2", "Reroll 1s and 2s once"),
    ],
}


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def roll(notation: str, rng: RandomSource | None = None) -> list[int]:
    """Parse and roll once.

    Success-count results come back as a one-element list so every roll has
    the same shape.
    """

    output = evaluate(parse(notation), rng or SystemRandomSource())
    return output.as_list()


def roll_many(notation: str, times: int, rng: RandomSource | None = None) -> list[RollOutput]:
    """Parse once and evaluate `times` independent rolls."""

    if times < 1:
        raise ValueError("times must be at least 1")

    expression = parse(notation)
    rng = rng or SystemRandomSource()
    return [evaluate(expression, rng) for _ in range(times)]


def _describe_output(output: RollOutput) -> str:
    if output.is_success_count:
        return f"{output.successes} net successes"
    return f"{list(output.values)} => {output.total}"


def roll_from_text(text: str, repeat: int = 1, rng: RandomSource | None = None) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""

    rng = rng or SystemRandomSource()
    outputs = roll_many(text, repeat, rng)
    normalized = format_expression(parse(text))

    rolls: list[dict[str, Any]] = []
    for output in outputs:
        entry: dict[str, Any] = {"values": list(output.values), "total": output.total}
        if output.is_success_count:
            entry["successes"] = output.successes
        rolls.append(entry)

    if repeat == 1:
        explanation = f"{normalized}: {_describe_output(outputs[0])}"
    else:
        explanation = "; ".join(
            f"roll {i}: {_describe_output(output)}" for i, output in enumerate(outputs, start=1)
        )

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "normalized_expression": normalized,
        "rng": {
            "source": getattr(rng, "name", type(rng).__name__),
            "nonce": str(uuid.uuid4()),
        },
        "rolls": rolls,
        "total": outputs[0].total if repeat == 1 else None,
        "explanation": explanation,
    }


def roll_duality(rng: RandomSource | None = None) -> dict[str, Any]:
    """Daggerheart duality dice: 2d12, the first is Hope, the second Fear.

    Doubles are a critical; otherwise the higher die names the outcome.
    """

    hope, fear = roll("2d12", rng)
    if hope == fear:
        outcome = "critical"
    elif hope > fear:
        outcome = "hope"
    else:
        outcome = "fear"

    verdict = "CRITICAL!" if outcome == "critical" else f"with {outcome.title()}"

    return {
        "hope": hope,
        "fear": fear,
        "total": hope + fear,
        "outcome": outcome,
        "explanation": f"Rolled {hope + fear} {verdict} [Hope: {hope}, Fear: {fear}]",
    }


def format_examples() -> str:
    lines: list[str] = []
    for section, examples in NOTATION_EXAMPLES.items():
        lines.append(f"{section}:")
        width = max(len(notation) for notation, _ in examples)
        for notation, description in examples:
            lines.append(f"  {notation.ljust(width)}  # {description}")
        lines.append("")
    return "\n".join(lines).rstrip()

