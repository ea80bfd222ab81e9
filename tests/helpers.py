from typing import List, Optional, Sequence

from fortress.engine.grid import FortressGrid

# A valid 4x4 Latin square with 2x2 boxes.
LATIN_4 = [
    1, 2, 3, 4,
    3, 4, 1, 2,
    2, 1, 4, 3,
    4, 3, 2, 1,
]

WIKIPEDIA_PUZZLE = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)

WIKIPEDIA_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def digits(text: str) -> List[Optional[int]]:
    return [int(ch) if ch.isdigit() and ch != "0" else None for ch in text]


def grid4(
    numbers: Sequence[Optional[int]] = (),
    shadings: Sequence[Optional[bool]] = (),
    circles: Sequence[bool] = (),
) -> FortressGrid:
    return FortressGrid(4, 2, 2, list(numbers), list(shadings), list(circles))


def brute_force_latin_4() -> set:
    """Every 4x4 Latin square with 2x2 boxes, built row by row."""

    from itertools import permutations

    rows = list(permutations(range(1, 5)))
    found = set()

    def box(index: int) -> int:
        row, col = divmod(index, 4)
        return row // 2 + (col // 2) * 2

    def extend(cells: List[int]) -> None:
        if len(cells) == 16:
            found.add(tuple(cells))
            return
        for row in rows:
            candidate = cells + list(row)
            ok = True
            for index in range(len(cells), len(candidate)):
                for other in range(index):
                    if candidate[other] != candidate[index]:
                        continue
                    if other % 4 == index % 4 or box(other) == box(index):
                        ok = False
                        break
                if not ok:
                    break
            if ok:
                extend(candidate)

    extend([])
    return found
