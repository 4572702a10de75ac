"""
depth thresholded coverage of raw (overlapping) ranges
"""
from itertools import groupby
from typing import Iterable, List, Tuple

import numpy as np

from .intspan import IntSpan
from .setmap import SetMap


def depth_spans(pairs: List[Tuple[int, int]], min_depth: int = 1) -> List[Tuple[int, int]]:
    """
    sweep the edges of a list of inclusive ranges and return the inclusive ranges covered at least min_depth times

    every range adds one at its start and removes one just after its end, the running sum is the depth

    Example:
        >>> depth_spans([(1, 100), (90, 150)], 2)
        [(90, 100)]
    """
    if not pairs:
        return []
    bounds = np.asarray(pairs, dtype=np.int64)
    positions = np.concatenate([bounds[:, 0], bounds[:, 1] + 1])
    deltas = np.concatenate([np.ones(len(bounds), dtype=np.int64), -np.ones(len(bounds), dtype=np.int64)])

    breakpoints, index = np.unique(positions, return_inverse=True)
    change = np.zeros(len(breakpoints), dtype=np.int64)
    np.add.at(change, index, deltas)
    depth = np.cumsum(change)

    covered = depth[:-1] >= min_depth
    spans = []
    # depth[i] holds from breakpoints[i] up to breakpoints[i + 1] - 1, the last depth is always 0
    for is_covered, group in groupby(range(len(covered)), key=lambda i: covered[i]):
        if is_covered:
            indices = list(group)
            spans.append((int(breakpoints[indices[0]]), int(breakpoints[indices[-1] + 1]) - 1))
    return spans


def cover(ranges: Iterable, coverage: int = 1) -> SetMap:
    """
    positions covered by at least coverage of the ranges, by chromosome

    Args:
        ranges (Iterable[Range]): the raw ranges, names and strands are ignored
        coverage: the minimum depth

    Raises:
        ValueError: coverage is less than 1
    """
    if coverage < 1:
        raise ValueError(f'coverage must be a positive integer: {coverage}')
    pairs_by_chr = {}
    for rng in ranges:
        pairs_by_chr.setdefault(rng.chr, []).append((rng.start, rng.end))

    result = SetMap()
    for chrom, pairs in pairs_by_chr.items():
        result[chrom] = IntSpan.from_spans(depth_spans(pairs, coverage))
    return result
