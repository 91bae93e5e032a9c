"""
DSA utilities
=============

Small, explicit Data Structures & Algorithms primitives used by the
dashboard pipeline.

Included:
- Merge Sort (stable, O(n log n)), also stable when sorting descending
- Intersection of two sorted lists (two-pointer technique)
- Systematic (fixed-stride) sampling
"""

from __future__ import annotations
from typing import List, Callable, Sequence, TypeVar

T = TypeVar("T")

def merge_sort(arr: Sequence[T], key: Callable[[T], object] = lambda x: x, reverse: bool = False) -> List[T]:
    """Stable merge sort. Equal keys keep their input order in both directions."""
    if len(arr) <= 1:
        return list(arr)
    mid = len(arr) // 2
    left = merge_sort(arr[:mid], key=key, reverse=reverse)
    right = merge_sort(arr[mid:], key=key, reverse=reverse)
    return _merge(left, right, key=key, reverse=reverse)

def _merge(left: List[T], right: List[T], key: Callable[[T], object], reverse: bool) -> List[T]:
    out: List[T] = []
    # i and j are pointers into each sorted list
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = key(left[i]), key(right[j])
        # on ties the left element wins
        take_left = (a >= b) if reverse else (a <= b)
        if take_left:
            out.append(left[i]); i += 1
        else:
            out.append(right[j]); j += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out

def intersect_sorted(a: List[int], b: List[int]) -> List[int]:
    """Two-pointer intersection for sorted integer lists."""
    # i and j are pointers into each sorted list
    i = j = 0
    out: List[int] = []
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            out.append(a[i]); i += 1; j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1
    return out

def systematic_sample(items: Sequence[T], max_points: int) -> List[T]:
    """Every `step`-th item (step = len // max_points), capped at max_points.

    Deterministic: the same input and bound always give the same subset,
    in the original order. Inputs that already fit are returned unchanged.
    """
    if max_points < 1:
        raise ValueError("max_points must be >= 1")
    n = len(items)
    if n <= max_points:
        return list(items)
    step = n // max_points
    return list(items[::step][:max_points])
