"""Dice expression evaluation and roll history."""

from .expression import (
    DiceErrorKind,
    DiceEvaluationFailure,
    DiceEvaluationResult,
    DiceEvaluator,
    DiceExpressionError,
    DiceRoll,
    DiceTerm,
    RandomSource,
    evaluate,
    parse,
    try_evaluate,
)
from .history import RollHistory
from .trace import parse_dice

__all__ = [
    "DiceErrorKind", "DiceEvaluationFailure", "DiceEvaluationResult", "DiceEvaluator",
    "DiceExpressionError", "DiceRoll", "DiceTerm", "RandomSource",
    "evaluate", "parse", "try_evaluate", "RollHistory", "parse_dice",
]
