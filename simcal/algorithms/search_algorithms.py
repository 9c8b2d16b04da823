# simcal/algorithms/search_algorithms.py

from typing import Sequence, Tuple


def binary_search(sequence: Sequence[int], item: int) -> Tuple[int, int]:
    """
    Binary search over a sorted list of ints.

    Returns:
        found_index (or -1 if not found),
        insertion_index (position where the item should go, after any equal run)
    """
    start_index = 0
    end_index = len(sequence) - 1
    found = -1

    while start_index <= end_index:
        mid = (start_index + end_index) // 2
        value = sequence[mid]

        if value == item:
            found = mid
            start_index = mid + 1   # keep going right so equal keys stay in arrival order
        elif value < item:
            start_index = mid + 1   # search right half
        else:
            end_index = mid - 1     # search left half

    return found, start_index
