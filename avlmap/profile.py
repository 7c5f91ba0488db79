"""Measure tree heights over random insert sequences.

Run as ``python -m avlmap.profile`` to print a table comparing the observed
heights with the worst-case AVL height bound.
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.random import default_rng

from .tree import AVLTree

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (10, 100, 1000, 10000, 100000)


def avl_height_bound(n: int) -> float:
    """Worst-case height (in nodes) of an AVL tree holding n keys."""
    return 1.4405 * np.log2(n + 2) - 0.3277


def random_keys(n: int, rng: np.random.Generator) -> List[int]:
    """n distinct integer keys in random insertion order."""
    return rng.permutation(n).tolist()


def build_tree(keys: Sequence[int]) -> AVLTree[int, int]:
    tree = AVLTree()
    for k in keys:
        tree.insert(k, k)
    return tree


def height_profile(
    sizes: Sequence[int], trials: int, seed: Optional[int] = None
) -> np.ndarray:
    """Build `trials` random trees for every size and record their heights.

    Returns an integer array of shape (len(sizes), trials).
    """
    rng = default_rng(seed)
    heights = np.zeros((len(sizes), trials), dtype=np.int64)

    for i, n in enumerate(sizes):
        for t in range(trials):
            tree = build_tree(random_keys(n, rng))
            heights[i, t] = tree.height()
        logger.info(
            "n=%d: mean height %.2f over %d trials", n, heights[i].mean(), trials
        )

    return heights


def format_profile(sizes: Sequence[int], heights: np.ndarray) -> str:
    lines = ["{:>8} | {:>6} | {:>4} | {:>6}".format("n", "mean", "max", "bound")]
    lines.append("-" * len(lines[0]))
    for n, row in zip(sizes, heights):
        lines.append(
            "{:>8d} | {:>6.2f} | {:>4d} | {:>6.2f}".format(
                n, row.mean(), int(row.max()), avl_height_bound(n)
            )
        )
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="avlmap.profile",
        description="Report AVL tree heights for random insert sequences.",
    )
    parser.add_argument(
        "--sizes", type=int, nargs="+", default=list(DEFAULT_SIZES), metavar="N"
    )
    parser.add_argument("--trials", type=int, default=5)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.trials < 1:
        parser.error("--trials must be at least 1")

    heights = height_profile(args.sizes, args.trials, args.seed)
    print(format_profile(args.sizes, heights))

    exceeded = [n for n, row in zip(args.sizes, heights) if row.max() > avl_height_bound(n)]
    if exceeded:
        logger.error("height bound exceeded for n = %s", exceeded)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
