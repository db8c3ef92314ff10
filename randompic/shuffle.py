"""Randomized renumbering of a category's images.

Published file names are plain indices (``0.webp``, ``1.webp``, ...). The
mapping from source file to index is a uniformly random permutation drawn
fresh on every build, so neither the original names nor their order can be
recovered from the published sequence.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

_SYSTEM_RANDOM = random.SystemRandom()


@dataclass(frozen=True)
class RenumberedAsset:
    index: int
    source: Path


def shuffle(items: List[T], rng: Optional[random.Random] = None) -> List[T]:
    """Shuffle ``items`` in place and return it.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle: walking from the last
    element down to the second, each position is swapped with a uniformly
    chosen position at or before it. Lists of length 0 or 1 are left as is.
    """
    if len(items) > 1:
        (rng or _SYSTEM_RANDOM).shuffle(items)
    return items


def shuffle_renumber(items: Sequence[Path], rng: Optional[random.Random] = None) -> List[RenumberedAsset]:
    """Assign indices ``0..n-1`` to a random permutation of ``items``.

    The input sequence is not modified.
    """
    order = shuffle(list(items), rng)
    return [RenumberedAsset(index=i, source=p) for i, p in enumerate(order)]
