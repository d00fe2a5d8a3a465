"""Binary space partition tree used to place sprites on the canvas.

Nodes live in parallel lists indexed by integer handle. A trial builds one
tree and discards it, so trees never share state.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from sprite_atlas.data import Rect
from sprite_atlas.packing.prng import next_value

LEFT_FIRST_THRESHOLD = 0x40000000
_NO_CHILD = -1


class PackingTree:
    """Canvas partition tree with one sprite per used leaf."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 1 or height <= 1:
            raise ValueError("Canvas width and height must be greater than 1.")
        self.width = width
        self.height = height
        self._rects: List[Rect] = []
        self._used: List[bool] = []
        self._left: List[int] = []
        self._right: List[int] = []
        # One pixel is reserved along the top and left edges.
        self.root = self._new_node((1, 1, width, height))

    def __len__(self) -> int:
        return len(self._rects)

    def _new_node(self, rect: Rect) -> int:
        self._rects.append(rect)
        self._used.append(False)
        self._left.append(_NO_CHILD)
        self._right.append(_NO_CHILD)
        return len(self._rects) - 1

    def _split(self, node: int, size: Tuple[int, int], slack: Tuple[int, int]) -> int:
        x0, y0, x1, y1 = self._rects[node]
        if slack[0] >= slack[1]:
            first = (x0, y0, x0 + size[0], y1)
            second = (x0 + size[0], y0, x1, y1)
        else:
            first = (x0, y0, x1, y0 + size[1])
            second = (x0, y0 + size[1], x1, y1)
        self._left[node] = self._new_node(first)
        self._right[node] = self._new_node(second)
        return self._left[node]

    def insert(self, size: Tuple[int, int], state: int) -> Tuple[Optional[Rect], int]:
        """Place a rectangle of ``size`` and return ``(rect, new_state)``.

        ``rect`` is None when no free leaf can hold the request. Internal
        nodes draw one value from the generator to choose which child to try
        first. The descent uses an explicit stack; pending siblings are
        visited in the same order a recursive descent would visit them.
        """

        pending = [self.root]
        while pending:
            node = pending.pop()
            if self._left[node] != _NO_CHILD:
                value, state = next_value(state)
                if value < LEFT_FIRST_THRESHOLD:
                    pending.append(self._right[node])
                    pending.append(self._left[node])
                else:
                    pending.append(self._left[node])
                    pending.append(self._right[node])
                continue

            if self._used[node]:
                continue
            x0, y0, x1, y1 = self._rects[node]
            slack = ((x1 - x0) - size[0], (y1 - y0) - size[1])
            if slack[0] < 0 or slack[1] < 0:
                continue

            self._used[node] = True
            if slack == (0, 0):
                return self._rects[node], state
            # The first child always matches the request on the split axis.
            pending.append(self._split(node, size, slack))

        return None, state

    def score(self) -> int:
        """Sum of squared areas of the free leaves.

        Larger is better: one big free region outscores many small ones.
        """

        total = 0
        for rect, used in zip(self._rects, self._used):
            if used:
                continue
            area = (rect[2] - rect[0]) * (rect[3] - rect[1])
            total += area * area
        return total

    def leaves(self) -> Iterator[Tuple[Rect, bool]]:
        """Yield ``(rect, used)`` for every leaf."""

        for node, rect in enumerate(self._rects):
            if self._left[node] == _NO_CHILD:
                yield rect, self._used[node]
