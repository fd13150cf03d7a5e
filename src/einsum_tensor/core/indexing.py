"""Row-major mapping between coordinates and flat buffer offsets.

The last axis varies fastest: the stride of axis ``i`` is the product of the
sizes of axes ``i+1 .. rank-1``.
"""

from __future__ import annotations

import operator
from typing import Iterable, Sequence, Tuple

from .exceptions import OutOfRange, RankMismatch


def prod(values: Iterable[int]) -> int:
    result = 1
    for value in values:
        result *= int(value)
    return result


def strides(shape: Sequence[int]) -> Tuple[int, ...]:
    out = [0] * len(shape)
    stride = 1
    for axis in range(len(shape) - 1, -1, -1):
        out[axis] = stride
        stride *= int(shape[axis])
    return tuple(out)


def flat_of(shape: Sequence[int], coordinate: Sequence[int]) -> int:
    """Return the flat offset of ``coordinate`` within a buffer of ``shape``.

    Raises :class:`RankMismatch` when the coordinate length differs from the
    rank and :class:`OutOfRange` when any component falls outside its axis.
    """
    if len(coordinate) != len(shape):
        raise RankMismatch(
            f"Coordinate {tuple(coordinate)} has {len(coordinate)} components "
            f"but the tensor has rank {len(shape)}",
            expected=len(shape),
            actual=len(coordinate),
        )
    offset = 0
    stride = 1
    for axis in range(len(shape) - 1, -1, -1):
        index = operator.index(coordinate[axis])
        size = int(shape[axis])
        if index < 0 or index >= size:
            raise OutOfRange(
                f"Index {index} is out of range for axis {axis} with size {size}",
                axis=axis,
                index=index,
                size=size,
            )
        offset += index * stride
        stride *= size
    return offset


def coordinate_of(shape: Sequence[int], offset: int) -> Tuple[int, ...]:
    # Only meaningful for 0 <= offset < prod(shape).
    coordinate = [0] * len(shape)
    remaining = int(offset)
    for axis in range(len(shape) - 1, -1, -1):
        size = int(shape[axis])
        coordinate[axis] = remaining % size
        remaining //= size
    return tuple(coordinate)
