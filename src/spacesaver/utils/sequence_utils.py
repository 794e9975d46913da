"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/sequence_utils.py
"""
import bisect
from typing import Any, Callable, List, TypeVar

T = TypeVar("T")


def insert_sorted(items: List[T], item: T, key: Callable[[T], Any]) -> int:
    """
    Insert `item` into `items` (already sorted by `key`) keeping it sorted.
    Equal keys keep insertion order: the new item goes after existing equals.
    Returns the index the item was inserted at.
    """
    index = bisect.bisect_right(items, key(item), key=key)
    items.insert(index, item)
    return index
