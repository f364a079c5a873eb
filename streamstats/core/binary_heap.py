"""
Array-backed binary max-heap ordered by an injected score function.

Used by the decaying reservoir sample to keep the eviction candidate at the
root. Scores are compared with ``>``, so any orderable score works.
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def _identity_score(element: Any) -> Any:
    return element


class BinaryHeap(Generic[T]):
    """
    Max-heap over ``score(element)``.

    Invariant: for every non-root position, score(parent) >= score(child).

    Complexity:
    - add: O(log n) per element
    - first / size: O(1)
    - remove_first: O(log n)
    - to_sorted_array: O(n log n), works on a clone
    """

    def __init__(
        self,
        elements: Optional[Iterable[T]] = None,
        score: Optional[Callable[[T], Any]] = None,
    ):
        """
        Args:
            elements: Initial elements, inserted one by one
            score: Key function; defaults to the element itself
        """
        self._elements: List[T] = []
        self._score = score or _identity_score

        if elements is not None:
            self.add(*elements)

    def add(self, *elements: T) -> None:
        """Insert one or more elements, restoring the heap after each."""
        for element in elements:
            self._elements.append(element)
            self._bubble(len(self._elements) - 1)

    def first(self) -> Optional[T]:
        """Return the root without removing it, or None if empty."""
        if not self._elements:
            return None
        return self._elements[0]

    def remove_first(self) -> Optional[T]:
        """
        Remove and return the root.

        The last element replaces the root and sinks back into place.

        Returns:
            Former root, or None if the heap was empty
        """
        if not self._elements:
            return None

        root = self._elements[0]
        last = self._elements.pop()

        if self._elements:
            self._elements[0] = last
            self._sink(0)

        return root

    def clone(self) -> "BinaryHeap[T]":
        """Independent heap with the same score function (elements shared)."""
        heap: BinaryHeap[T] = BinaryHeap(score=self._score)
        # Already heap-ordered, no need to re-bubble
        heap._elements = self.to_array()
        return heap

    def to_sorted_array(self) -> List[T]:
        """Elements in descending score order. The heap itself is untouched."""
        clone = self.clone()
        result = []
        while clone.size() > 0:
            result.append(clone.remove_first())
        return result

    def to_array(self) -> List[T]:
        """Snapshot copy in internal heap order."""
        return list(self._elements)

    def size(self) -> int:
        return len(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def _bubble(self, index: int) -> None:
        element = self._elements[index]
        element_score = self._score(element)

        while index > 0:
            parent_index = (index - 1) // 2
            parent = self._elements[parent_index]

            if element_score <= self._score(parent):
                break

            self._elements[parent_index] = element
            self._elements[index] = parent
            index = parent_index

    def _sink(self, index: int) -> None:
        element = self._elements[index]
        element_score = self._score(element)
        length = len(self._elements)

        while True:
            swap_index = None
            swap_score = None

            for child_index in (2 * index + 1, 2 * index + 2):
                if child_index >= length:
                    break

                child_score = self._score(self._elements[child_index])
                if child_score > element_score:
                    # Prefer the strictly larger child
                    if swap_score is None or child_score > swap_score:
                        swap_index = child_index
                        swap_score = child_score

            if swap_index is None:
                break

            self._elements[index] = self._elements[swap_index]
            self._elements[swap_index] = element
            index = swap_index
