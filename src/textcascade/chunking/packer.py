"""
Greedy regrouping of boundary-split pieces under a size budget.
"""

from typing import List

from .boundaries import Boundary
from .metrics import text_length


def pack(
    text: str, boundary: Boundary, budget: int, count_whitespace: bool = False
) -> List[str]:
    """
    Split ``text`` on ``boundary`` and merge the pieces back into the largest
    contiguous groups whose significant length stays within ``budget``.

    A single piece larger than the budget is returned on its own; callers
    decide whether to refine it further. ``"".join(result) == text``.
    """
    results: List[str] = []
    group: List[str] = []

    for piece in boundary.split(text):
        group.append(piece)

        if text_length("".join(group), count_whitespace) > budget:
            if len(group) > 1:
                results.append("".join(group[:-1]))
                group = [group[-1]]
            else:
                results.append(group[0])
                group = []

    if group:
        results.append("".join(group))

    return results
