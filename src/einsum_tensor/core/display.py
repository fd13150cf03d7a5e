"""Human-readable renderings of tensors for debugging."""

from __future__ import annotations

import itertools
from typing import List

from .tensor import Tensor

ZERO_TOL = 1e-9
ZERO_GLYPH = "."


def format_nonzero(tensor: Tensor, tol: float = ZERO_TOL) -> str:
    lines = [f"Nonzero entries (shape={tensor.shape}):"]
    for coordinate, value in tensor.nonzero(tol):
        lines.append(f"  {coordinate} -> {value:.2f}")
    return "\n".join(lines)


def print_nonzero(tensor: Tensor, tol: float = ZERO_TOL) -> None:
    print(format_nonzero(tensor, tol))


def format_slices(tensor: Tensor, tol: float = ZERO_TOL) -> str:
    """Render a tensor as 2D matrix slices over its leading axes.

    Tensors of rank below 2 are rendered on a single line.
    """
    if tensor.rank < 2:
        return f"Tensor {tensor.shape}: {tensor.data.tolist()}"

    outer = tensor.shape[:-2]
    rows, cols = tensor.shape[-2], tensor.shape[-1]
    lines: List[str] = []
    for prefix in itertools.product(*(range(size) for size in outer)):
        lines.append(f"Slice {prefix}:" if outer else "Matrix:")
        for r in range(rows):
            cells = []
            for c in range(cols):
                value = tensor.get(prefix + (r, c))
                if abs(value) < tol:
                    cells.append(f"{ZERO_GLYPH:^5}")
                else:
                    cells.append(f"{value:^5.2f}")
            lines.append("[ " + "".join(cells) + " ]")
        lines.append("")
    return "\n".join(lines)


def print_tensor(tensor: Tensor, tol: float = ZERO_TOL) -> None:
    print(format_slices(tensor, tol))
