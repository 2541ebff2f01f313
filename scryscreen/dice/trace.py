"""Read individual die values back out of an evaluation trace."""

import re

DICE_TERM_PATTERN = re.compile(
    r"(?P<count>\d+)d(?P<sides>\d+)\((?P<rolls>[^)]*)\)",
    re.IGNORECASE,
)


def parse_dice(text: str | None) -> list[tuple[int, int]]:
    """Extract (sides, value) pairs from a trace such as "2d6(4,5) + 3 = 12".

    Dice with fewer than two sides and non-numeric values are skipped.

    Args:
        text: Display text produced by the dice evaluator

    Returns:
        List of (sides, value) tuples in trace order
    """
    result: list[tuple[int, int]] = []
    if not text or not text.strip():
        return result

    for match in DICE_TERM_PATTERN.finditer(text):
        sides = int(match.group("sides"))
        if sides <= 1:
            continue

        for part in match.group("rolls").split(","):
            part = part.strip()
            if part.isascii() and part.isdigit():
                result.append((sides, int(part)))

    return result
