from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import format_examples, roll_duality, roll_from_text
from .errors import DiceError
from .parser import parse
from .stats import roll_statistics


logger = logging.getLogger(__name__)

mcp = FastMCP(settings.server_name)


def _check_dice_count(notation: str) -> None:
    """Reject notations that would roll more dice than one call may.

    Raises DiceError for invalid notation, ValueError over the limit.
    """

    total = sum(group.count for group in parse(notation).dice_groups)
    if total > settings.max_dice:
        raise ValueError(f"{notation!r} rolls {total} dice, the limit is {settings.max_dice}")


@mcp.tool()
def roll_dice(notation: str, repeat: int = 1) -> dict[str, Any]:
    """Roll dice from tabletop notation, e.g. '4d6K3 + 2' or '10d10>6f<3'.

    Input: notation (string), repeat (how many independent rolls, default 1)
    Output: structured JSON with audit details + explanation

    Raises a hard error (exception) on invalid input.
    """

    if not 1 <= repeat <= settings.max_repeat:
        raise ValueError(f"repeat must be between 1 and {settings.max_repeat}")

    try:
        _check_dice_count(notation)
        result = roll_from_text(notation, repeat=repeat)
    except DiceError as e:
        logger.info("Rejected notation %r: %s", notation, e)
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None

    logger.info("Rolled %s x%d", result["normalized_expression"], repeat)
    return result


@mcp.tool()
def dice_statistics(notation: str, rolls: int | None = None) -> dict[str, Any]:
    """Roll a notation many times and report min, max, mean, median and distribution."""

    rolls = rolls if rolls is not None else settings.default_stats_rolls
    if not 1 <= rolls <= settings.max_stats_rolls:
        raise ValueError(f"rolls must be between 1 and {settings.max_stats_rolls}")

    try:
        _check_dice_count(notation)
        stats = roll_statistics(notation, rolls)
    except DiceError as e:
        logger.info("Rejected notation %r: %s", notation, e)
        raise ValueError(str(e)) from None

    logger.info("Computed statistics for %s over %d rolls", stats.notation, rolls)
    return stats.as_dict()


@mcp.tool()
def duality_roll() -> dict[str, Any]:
    """Roll Daggerheart duality dice (2d12 Hope/Fear, doubles are critical)."""

    return roll_duality()


@mcp.tool()
def notation_examples() -> str:
    """List supported dice notation with short explanations."""

    return format_examples()


def run() -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s MCP server", settings.server_name)
    mcp.run()


if __name__ == "__main__":
    run()
