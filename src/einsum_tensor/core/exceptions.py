from __future__ import annotations

from typing import Optional, Sequence


class EinsumError(Exception):
    """Base class for einsum-tensor specific exceptions."""


class ParseError(EinsumError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        column: Optional[int] = None,
        formula: Optional[str] = None,
    ):
        detail = _format_location(column, formula)
        super().__init__(f"{message}{detail}")
        self.column = column
        self.formula = formula


class ArityMismatch(EinsumError, ValueError):
    def __init__(self, message: str, *, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class RankMismatch(EinsumError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        expected: int,
        actual: int,
        operand: Optional[int] = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.operand = operand


class OutOfRange(EinsumError, IndexError, ValueError):
    def __init__(self, message: str, *, axis: int, index: int, size: int):
        super().__init__(message)
        self.axis = axis
        self.index = index
        self.size = size


class DimensionConflict(EinsumError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        symbol: str,
        expected: int,
        actual: int,
        operand: Optional[int] = None,
    ):
        super().__init__(message)
        self.symbol = symbol
        self.expected = expected
        self.actual = actual
        self.operand = operand


class UnboundOutputSymbol(EinsumError, ValueError):
    def __init__(self, message: str, *, symbol: str):
        super().__init__(message)
        self.symbol = symbol


class ShapeMismatch(EinsumError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        position: Sequence[int] = (),
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):
        super().__init__(message)
        self.position = tuple(position)
        self.expected = expected
        self.actual = actual


class BackendError(EinsumError, RuntimeError):
    pass


def _format_location(column: Optional[int], formula: Optional[str]) -> str:
    if column is None:
        return ""
    location_str = f" (col {column})"
    if formula is None or column < 1:
        return location_str
    caret = " " * (column - 1) + "^"
    return f"{location_str}\n  {formula}\n  {caret}"
