from __future__ import annotations


class DiceError(ValueError):
    """User-facing notation errors. Terminal for the call that raised them."""

    code = "DICE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(f"[{self.code}] {message}")


class EmptyInputError(DiceError):
    code = "EMPTY_INPUT"

    def __init__(self) -> None:
        super().__init__("Empty dice notation. Example: '2d6 + 3' or 'd20'.")


class InvalidNotationError(DiceError):
    code = "INVALID_NOTATION"

    def __init__(self, input: str, reason: str) -> None:
        self.input = input
        self.reason = reason
        super().__init__(f"Invalid dice notation '{input}': {reason}. Example: '4d6K3 + 2'.")


class InvalidDieSizeError(DiceError):
    code = "INVALID_DIE_SIZE"

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Invalid die size '{size}': must be a positive integer. Example: '1d20'.")


class InvalidDiceCountError(DiceError):
    code = "INVALID_DICE_COUNT"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Invalid dice count '{count}': must be a positive integer. Example: '3d6'.")


class InvalidModifierError(DiceError):
    code = "INVALID_MODIFIER"

    def __init__(self, modifier: str, reason: str | None = None) -> None:
        self.modifier = modifier
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid modifier '{modifier}'{detail}. Example: '10d10>6f<3'.")


class UnsupportedOperatorError(DiceError):
    code = "UNSUPPORTED_OPERATOR"

    def __init__(self, operator: str, input: str) -> None:
        self.operator = operator
        self.input = input
        super().__init__(
            f"Unsupported operator '{operator}' in dice notation '{input}'. "
            "Only + - * / // are supported. Example: '2d6 * 2'."
        )
