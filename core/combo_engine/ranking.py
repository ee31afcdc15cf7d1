"""
ranking.py - Deduplication and ordering of discovered combos
"""
from typing import Iterable, List, Optional

from .patterns import ComboPattern


def dedupe_and_rank(combos: Iterable[ComboPattern], limit: Optional[int] = None) -> List[ComboPattern]:
    """Drop repeated (participants, type) combos and sort by power level.

    The first occurrence of a key wins. Sorting is stable, so combos of equal
    power keep their discovery order and a second pass returns the same list.
    """
    seen = set()
    unique: List[ComboPattern] = []
    for combo in combos:
        key = combo.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(combo)

    ranked = sorted(unique, key=lambda c: c.power_level, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
