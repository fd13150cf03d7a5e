from __future__ import annotations

from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import ShapeMismatch
from .indexing import coordinate_of, flat_of, prod

Scalar = Union[int, float]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def _infer_shape(values: Any) -> Tuple[int, ...]:
    shape: List[int] = []
    probe = values
    while _is_sequence(probe):
        shape.append(len(probe))
        if len(probe) == 0:
            break
        probe = probe[0]
    return tuple(shape)


def _flatten_into(
    values: Any,
    shape: Tuple[int, ...],
    depth: int,
    position: Tuple[int, ...],
    out: List[float],
) -> None:
    if depth == len(shape):
        if _is_sequence(values):
            raise ShapeMismatch(
                f"Expected a scalar at position {list(position)} but found a sequence",
                position=position,
            )
        out.append(float(values))
        return
    if not _is_sequence(values):
        raise ShapeMismatch(
            f"Expected a sequence of length {shape[depth]} at position {list(position)} "
            f"but found a scalar",
            position=position,
            expected=shape[depth],
        )
    if len(values) != shape[depth]:
        raise ShapeMismatch(
            f"Sequence at position {list(position)} has length {len(values)}, "
            f"expected {shape[depth]} like its siblings",
            position=position,
            expected=shape[depth],
            actual=len(values),
        )
    for idx, item in enumerate(values):
        _flatten_into(item, shape, depth + 1, position + (idx,), out)


class Tensor:
    """Dense row-major tensor of 64-bit floats.

    The shape is fixed at construction; individual entries are mutable via
    :meth:`set`. The flat buffer always holds exactly ``prod(shape)`` values,
    so a rank-0 tensor carries a single scalar.
    """

    __slots__ = ("_shape", "_data")

    def __init__(self, shape: Sequence[int], data: Optional[Any] = None):
        dims = tuple(int(size) for size in shape)
        for axis, size in enumerate(dims):
            if size < 0:
                raise ShapeMismatch(
                    f"Axis {axis} has negative size {size}",
                    position=(axis,),
                    actual=size,
                )
        size = prod(dims)
        if data is None:
            buffer = np.zeros(size, dtype=np.float64)
        else:
            buffer = np.array(data, dtype=np.float64).reshape(-1)
            if buffer.size != size:
                raise ShapeMismatch(
                    f"Buffer of {buffer.size} values cannot fill shape {dims} "
                    f"({size} values)",
                    expected=size,
                    actual=int(buffer.size),
                )
        self._shape = dims
        self._data = buffer

    # Factories ----------------------------------------------------------------
    @classmethod
    def zeros(cls, shape: Sequence[int]) -> "Tensor":
        return cls(shape)

    @classmethod
    def from_nested(cls, values: Any) -> "Tensor":
        """Build a tensor of any rank from nested lists or tuples.

        A bare scalar yields a rank-0 tensor. Every sequence at a given depth
        must have the same length as its siblings.
        """
        shape = _infer_shape(values)
        flat: List[float] = []
        _flatten_into(values, shape, 0, (), flat)
        return cls(shape, flat)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Scalar]]) -> "Tensor":
        return cls._from_nested_rank(rows, 2, "rows")

    @classmethod
    def from_cubes(cls, cubes: Sequence[Sequence[Sequence[Scalar]]]) -> "Tensor":
        return cls._from_nested_rank(cubes, 3, "cubes")

    @classmethod
    def _from_nested_rank(cls, values: Any, rank: int, kind: str) -> "Tensor":
        tensor = cls.from_nested(values)
        if tensor.rank != rank:
            raise ShapeMismatch(
                f"Expected {kind} nested {rank} levels deep, found shape {tensor.shape}",
                expected=rank,
                actual=tensor.rank,
            )
        return tensor

    @classmethod
    def from_numpy(cls, array: Any) -> "Tensor":
        arr = np.asarray(array, dtype=np.float64)
        return cls(arr.shape, arr)

    # Accessors ----------------------------------------------------------------
    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def rank(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def data(self) -> np.ndarray:
        view = self._data.view()
        view.flags.writeable = False
        return view

    def get(self, coordinate: Sequence[int]) -> float:
        return float(self._data[flat_of(self._shape, coordinate)])

    def set(self, coordinate: Sequence[int], value: Scalar) -> None:
        self._data[flat_of(self._shape, coordinate)] = float(value)

    def __getitem__(self, coordinate: Any) -> float:
        if not isinstance(coordinate, tuple):
            coordinate = (coordinate,)
        return self.get(coordinate)

    def __setitem__(self, coordinate: Any, value: Scalar) -> None:
        if not isinstance(coordinate, tuple):
            coordinate = (coordinate,)
        self.set(coordinate, value)

    def nonzero(self, tol: float = 1e-9) -> Iterator[Tuple[Tuple[int, ...], float]]:
        for offset, value in enumerate(self._data):
            if abs(value) > tol:
                yield coordinate_of(self._shape, offset), float(value)

    # Conversions --------------------------------------------------------------
    def copy(self) -> "Tensor":
        return Tensor(self._shape, self._data)

    def to_numpy(self) -> np.ndarray:
        return self._data.reshape(self._shape).copy()

    def tolist(self) -> Any:
        return self.to_numpy().tolist()

    def allclose(self, other: "Tensor", tol: float = 1e-9) -> bool:
        if not isinstance(other, Tensor) or other.shape != self._shape:
            return False
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other._shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape}, data={self._data.tolist()})"
