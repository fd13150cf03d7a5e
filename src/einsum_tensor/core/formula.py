from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedInput

from .exceptions import (
    ArityMismatch,
    DimensionConflict,
    ParseError,
    RankMismatch,
    UnboundOutputSymbol,
)

FORMULA_GRAMMAR = r"""
start: operands ARROW output

operands: group ("," group)*
group: SYMBOLS?
output: SYMBOLS?

ARROW: "->"
SYMBOLS: /[A-Za-z]+/

%ignore " "
"""


@lru_cache(maxsize=1)
def _build_lark() -> Lark:
    return Lark(
        FORMULA_GRAMMAR,
        parser="lalr",
        start="start",
        maybe_placeholders=False,
    )


@dataclass(frozen=True)
class Formula:
    """Parsed subscript string: one symbol group per operand plus the output."""

    inputs: Tuple[str, ...]
    output: str
    source: str

    @property
    def symbols(self) -> Tuple[str, ...]:
        # First appearance, inputs left to right.
        return tuple(dict.fromkeys("".join(self.inputs)))

    def __str__(self) -> str:
        return f"{','.join(self.inputs)}->{self.output}"


@dataclass(frozen=True)
class Binding:
    """Symbols of one formula resolved against concrete operand shapes."""

    formula: Formula
    sizes: Dict[str, int]
    order: Tuple[str, ...]
    output_shape: Tuple[int, ...]

    @property
    def limits(self) -> Tuple[int, ...]:
        return tuple(self.sizes[symbol] for symbol in self.order)

    @property
    def positions(self) -> Dict[str, int]:
        return {symbol: idx for idx, symbol in enumerate(self.order)}

    @property
    def output_symbols(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(self.formula.output))

    @property
    def contracted(self) -> Tuple[str, ...]:
        output = set(self.formula.output)
        return tuple(symbol for symbol in self.order if symbol not in output)


class _FormulaXform(Transformer):
    def __init__(self, text: str):
        super().__init__()
        self._text = text

    def start(self, items):
        groups, output = items[0], items[-1]
        return Formula(inputs=tuple(groups), output=output, source=self._text)

    def operands(self, items: List[str]) -> List[str]:
        return list(items)

    def group(self, items: List[Token]) -> str:
        return str(items[0]) if items else ""

    def output(self, items: List[Token]) -> str:
        return str(items[0]) if items else ""


def parse_formula(text: str) -> Formula:
    """Parse ``"<in1>,<in2>,...-><out>"`` into a :class:`Formula`.

    Symbols are single ASCII letters and are case-sensitive. Spaces are
    ignored. Malformed text raises :class:`ParseError` pointing at the first
    offending column.
    """
    if not isinstance(text, str):
        raise ParseError(f"Formula must be a string, got {type(text).__name__}")
    return _parse_formula(text)


@lru_cache(maxsize=256)
def _parse_formula(text: str) -> Formula:
    parser = _build_lark()
    try:
        tree = parser.parse(text)
    except UnexpectedCharacters as exc:
        char = text[exc.pos_in_stream] if exc.pos_in_stream < len(text) else ""
        raise ParseError(
            f"Unexpected character {char!r} in formula; symbols must be ASCII letters",
            column=exc.column,
            formula=text,
        ) from None
    except UnexpectedInput as exc:
        column = exc.column if isinstance(exc.column, int) and exc.column > 0 else len(text) + 1
        raise ParseError(
            "Malformed formula; expected '<in>,<in>,...-><out>' with exactly one '->'",
            column=column,
            formula=text,
        ) from None
    except LarkError as exc:  # pragma: no cover - grammar is static
        raise ParseError(f"Malformed formula: {exc}", formula=text) from None
    return _FormulaXform(text).transform(tree)


def bind_formula(formula: Formula, shapes: Sequence[Sequence[int]]) -> Binding:
    """Resolve every symbol of ``formula`` to a dimension size.

    The first operand axis that uses a symbol fixes its size; every later use
    is checked against it. Symbols missing from the output are summed over.
    """
    if len(formula.inputs) != len(shapes):
        raise ArityMismatch(
            f"Formula '{formula}' declares {len(formula.inputs)} operand(s) "
            f"but {len(shapes)} tensor(s) were supplied",
            expected=len(formula.inputs),
            actual=len(shapes),
        )

    sizes: Dict[str, int] = {}
    for operand, (group, shape) in enumerate(zip(formula.inputs, shapes)):
        if len(group) != len(shape):
            raise RankMismatch(
                f"Operand {operand} has rank {len(shape)} but its subscripts "
                f"'{group}' name {len(group)} axes",
                expected=len(group),
                actual=len(shape),
                operand=operand,
            )
        for symbol, size in zip(group, shape):
            size = int(size)
            prev = sizes.get(symbol)
            if prev is None:
                sizes[symbol] = size
            elif prev != size:
                raise DimensionConflict(
                    f"Symbol '{symbol}' is bound to size {prev} but operand "
                    f"{operand} uses it with size {size}",
                    symbol=symbol,
                    expected=prev,
                    actual=size,
                    operand=operand,
                )

    output_shape: List[int] = []
    for symbol in formula.output:
        if symbol not in sizes:
            raise UnboundOutputSymbol(
                f"Output symbol '{symbol}' does not appear in any input of '{formula}'",
                symbol=symbol,
            )
        output_shape.append(sizes[symbol])

    return Binding(
        formula=formula,
        sizes=sizes,
        order=formula.symbols,
        output_shape=tuple(output_shape),
    )
