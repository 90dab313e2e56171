from __future__ import annotations
from typing import Iterable, List, Sequence

def format_table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> List[str]:
    """Left-aligned columns, two spaces apart; last column is not padded."""
    cells = [[str(c) for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, c in enumerate(row):
            widths[i] = max(widths[i], len(c))

    def line(row: Sequence[str]) -> str:
        padded = [c.ljust(widths[i]) for i, c in enumerate(row[:-1])]
        return "  ".join(padded + [row[-1]])

    return [line(list(headers))] + [line(r) for r in cells]
