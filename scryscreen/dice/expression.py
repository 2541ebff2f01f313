"""Dice expression evaluator for algebraic dice notation.

Supports expressions such as ``d20``, ``2d6+3``, ``-1d4`` and ``3d8+2d6-1``.
Every evaluation returns both the total and a trace of each individual die,
e.g. ``"2d6(4,4) + 3 = 11"``.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..config import MAX_DICE_COUNT, MAX_DICE_SIDES, AppConfig, get_config

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")
_INT32_MAX = 2**31 - 1


class RandomSource(Protocol):
    """Anything that can produce a uniform integer in ``[low, high]`` inclusive.

    ``random.Random`` satisfies this protocol.
    """

    def randint(self, a: int, b: int) -> int: ...


class DiceErrorKind(Enum):
    """Category of a rejected dice expression."""

    PARSE = "parse"
    RANGE = "range"
    PRECONDITION = "precondition"


class DiceExpressionError(ValueError):
    """Raised when a dice expression cannot be parsed or evaluated."""

    def __init__(self, message: str, kind: DiceErrorKind = DiceErrorKind.PARSE):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class DiceTerm:
    """One signed term of an expression: either ``NdM`` or a constant."""

    negative: bool
    count: int = 0
    sides: int = 0
    constant: int = 0

    @property
    def is_dice(self) -> bool:
        return self.sides > 0

    @property
    def sign(self) -> int:
        return -1 if self.negative else 1


@dataclass(frozen=True)
class DiceRoll:
    """The individual values rolled for one dice term."""

    count: int
    sides: int
    values: tuple[int, ...]

    @property
    def subtotal(self) -> int:
        return sum(self.values)

    def __str__(self) -> str:
        return f"{self.count}d{self.sides}({','.join(str(v) for v in self.values)})"


@dataclass(frozen=True)
class DiceEvaluationResult:
    """Successful evaluation with total and display trace."""

    total: int
    display_text: str
    rolls: tuple[DiceRoll, ...] = ()

    @property
    def ok(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.display_text


@dataclass(frozen=True)
class DiceEvaluationFailure:
    """Rejected expression with a human-readable message."""

    kind: DiceErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.message


class DiceEvaluator:
    """Parses and evaluates dice expressions against an injected random source."""

    def __init__(
        self,
        max_dice_count: int = MAX_DICE_COUNT,
        max_dice_sides: int = MAX_DICE_SIDES,
    ):
        """Initialize the evaluator.

        Args:
            max_dice_count: Largest dice count accepted in a single term
            max_dice_sides: Largest number of sides accepted for a die
        """
        # Limits can be tightened but never raised past the hard ceilings
        self.max_dice_count = max(1, min(max_dice_count, MAX_DICE_COUNT))
        self.max_dice_sides = max(1, min(max_dice_sides, MAX_DICE_SIDES))

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> "DiceEvaluator":
        """Build an evaluator from the ``dice`` configuration section."""
        if config is None:
            config = get_config()
        return cls(
            max_dice_count=config.dice.max_dice_count,
            max_dice_sides=config.dice.max_dice_sides,
        )

    def parse(self, expression: str | None) -> tuple[DiceTerm, ...]:
        """Parse an expression into its signed terms without rolling.

        Args:
            expression: Dice expression, whitespace is ignored

        Returns:
            Tuple of DiceTerm in source order

        Raises:
            DiceExpressionError: If the expression is malformed or out of range
        """
        text = "".join((expression or "").split())
        if not text:
            raise DiceExpressionError("Expression is empty.")

        terms: list[DiceTerm] = []
        index = 0
        first = True

        while index < len(text):
            negative = False
            if text[index] == "+":
                index += 1
            elif text[index] == "-":
                negative = True
                index += 1
            elif not first:
                raise DiceExpressionError("Expected '+' or '-' between terms.")

            first = False

            if index >= len(text):
                raise DiceExpressionError("Trailing operator.")

            # A term runs until the next operator
            start = index
            while index < len(text) and text[index] not in "+-":
                index += 1

            term_text = text[start:index]
            if not term_text:
                raise DiceExpressionError("Empty term.")

            terms.append(self._parse_term(term_text, negative))

        if not terms:
            raise DiceExpressionError("Expression has no terms.")

        return tuple(terms)

    def _parse_term(self, term_text: str, negative: bool) -> DiceTerm:
        dice = _split_dice_term(term_text)
        if dice is not None:
            count, sides = dice
            if count <= 0 or sides <= 0:
                raise DiceExpressionError("Dice term must be positive.", DiceErrorKind.RANGE)
            if count > self.max_dice_count:
                raise DiceExpressionError(
                    f"Too many dice (max {self.max_dice_count}).", DiceErrorKind.RANGE
                )
            if sides > self.max_dice_sides:
                raise DiceExpressionError(
                    f"Dice sides too large (max {self.max_dice_sides}).", DiceErrorKind.RANGE
                )
            return DiceTerm(negative=negative, count=count, sides=sides)

        constant = _read_int(term_text)
        if constant is None:
            raise DiceExpressionError(f"Invalid term '{term_text}'.")

        return DiceTerm(negative=negative, constant=constant)

    def evaluate(self, expression: str | None, rng: RandomSource | None) -> DiceEvaluationResult:
        """Parse and roll an expression.

        Args:
            expression: Dice expression (e.g. "2d6+3")
            rng: Random source; ``rng.randint(1, sides)`` is drawn once per die

        Returns:
            DiceEvaluationResult with total, trace and individual rolls

        Raises:
            DiceExpressionError: If the expression is invalid or rng is missing
        """
        if rng is None:
            raise DiceExpressionError("Random source is required.", DiceErrorKind.PRECONDITION)

        terms = self.parse(expression)

        total = 0
        parts: list[str] = []
        rolls: list[DiceRoll] = []

        for i, term in enumerate(terms):
            if i > 0:
                parts.append(" - " if term.negative else " + ")
            elif term.negative:
                parts.append("-")

            if term.is_dice:
                values = tuple(rng.randint(1, term.sides) for _ in range(term.count))
                roll = DiceRoll(count=term.count, sides=term.sides, values=values)
                rolls.append(roll)
                parts.append(str(roll))
                total += term.sign * roll.subtotal
            else:
                parts.append(str(term.constant))
                total += term.sign * term.constant

        parts.append(f" = {total}")

        return DiceEvaluationResult(total=total, display_text="".join(parts), rolls=tuple(rolls))

    def try_evaluate(
        self,
        expression: str | None,
        rng: RandomSource | None,
    ) -> DiceEvaluationResult | DiceEvaluationFailure:
        """Evaluate an expression, returning a failure value instead of raising.

        Args:
            expression: Dice expression
            rng: Random source

        Returns:
            DiceEvaluationResult on success, DiceEvaluationFailure otherwise
        """
        try:
            return self.evaluate(expression, rng)
        except DiceExpressionError as e:
            logger.debug(f"Rejected dice expression {expression!r}: {e}")
            return DiceEvaluationFailure(kind=e.kind, message=str(e))


def _split_dice_term(term_text: str) -> tuple[int, int] | None:
    """Split ``NdM`` into (count, sides), or None if it is not a dice term."""
    d_index = term_text.find("d")
    if d_index < 0:
        d_index = term_text.find("D")
    if d_index < 0:
        return None

    left = term_text[:d_index]
    right = term_text[d_index + 1:]

    count = _read_int(left) if left else 1
    sides = _read_int(right)
    if count is None or sides is None:
        return None

    return count, sides


def _read_int(text: str) -> int | None:
    """Read an unsigned literal that fits a 32-bit signed int, else None."""
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _INT32_MAX else None


_default_evaluator = DiceEvaluator()


# Convenience functions using the default limits
def parse(expression: str | None) -> tuple[DiceTerm, ...]:
    """Parse an expression with the default evaluator."""
    return _default_evaluator.parse(expression)


def evaluate(expression: str | None, rng: RandomSource | None) -> DiceEvaluationResult:
    """Evaluate an expression with the default evaluator, raising on error."""
    return _default_evaluator.evaluate(expression, rng)


def try_evaluate(
    expression: str | None,
    rng: RandomSource | None,
) -> DiceEvaluationResult | DiceEvaluationFailure:
    """Evaluate an expression with the default evaluator, never raising."""
    return _default_evaluator.try_evaluate(expression, rng)
