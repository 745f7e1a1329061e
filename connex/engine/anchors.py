"""Checkpoint placement along a generating path."""

from __future__ import annotations

import random
from typing import List, Sequence

from ..core.models import Anchor, Cell
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def pick_indices_with_min_gap(
    length: int, count: int, min_gap: int, rng: random.Random
) -> List[int]:
    """Pick ``count`` path indices, preferring pairwise distance >= ``min_gap``.

    Spacing is best effort: when the shuffled pool runs dry the remaining
    slots are filled in shuffle order regardless of distance.
    """

    pool = list(range(length))
    rng.shuffle(pool)
    picks: List[int] = []
    for index in pool:
        if len(picks) == count:
            break
        if all(abs(index - other) >= min_gap for other in picks):
            picks.append(index)

    if len(picks) < count:
        LOGGER.debug(
            "Spacing %s too strict for %s anchors on %s cells; filling %s slots",
            min_gap,
            count,
            length,
            count - len(picks),
        )
        chosen = set(picks)
        for index in pool:
            if len(picks) == count:
                break
            if index not in chosen:
                chosen.add(index)
                picks.append(index)
    return sorted(picks)


def assign_anchor_numbers(
    path: Sequence[Cell], indices: Sequence[int], rng: random.Random
) -> List[Anchor]:
    """Number the sorted picks 1..K under a random cyclic shift."""

    count = len(indices)
    shift = rng.randrange(count) if count else 0
    anchors: List[Anchor] = []
    for j, index in enumerate(sorted(indices)):
        number = ((j - shift + count) % count) + 1
        anchors.append(Anchor(number=number, cell=path[index]))
    return sorted(anchors)


def place_anchors(
    path: Sequence[Cell], count: int, min_gap: int, rng: random.Random
) -> List[Anchor]:
    indices = pick_indices_with_min_gap(len(path), count, min_gap, rng)
    return assign_anchor_numbers(path, indices, rng)
