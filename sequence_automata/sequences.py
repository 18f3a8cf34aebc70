"""Named target sequences for the search."""

from typing import Dict, List, Tuple

# 1 is the seed cell, then the primes
PRIMES: Tuple[int, ...] = (1, 2, 3, 5, 7, 11, 13, 17, 19, 23, 29)
ODD_NUMBERS: Tuple[int, ...] = (1, 3, 5, 7, 9, 11, 13, 15, 17, 19)
SQUARES_OF_ODD: Tuple[int, ...] = (1, 9, 25, 49, 81, 121)
NATURALS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)

KNOWN_SEQUENCES: Dict[str, Tuple[int, ...]] = {
    "primes": PRIMES,
    "odd": ODD_NUMBERS,
    "odd-squares": SQUARES_OF_ODD,
    "naturals": NATURALS,
}


def parse_sequence(text: str) -> List[int]:
    """Parse a sequence name or a comma separated list like '1,3,5,7'."""
    key = text.strip().lower()
    if key in KNOWN_SEQUENCES:
        return list(KNOWN_SEQUENCES[key])

    try:
        values = [int(part) for part in key.replace(" ", "").split(",") if part]
    except ValueError:
        raise ValueError(
            f"Expected one of {sorted(KNOWN_SEQUENCES)} or comma separated integers, got {text!r}"
        ) from None

    if not values:
        raise ValueError("Target sequence is empty")
    if any(v < 1 for v in values):
        raise ValueError(f"Target sequence entries must be positive: {values}")
    return values
