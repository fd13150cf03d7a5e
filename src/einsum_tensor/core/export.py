from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence, Union

from .exceptions import ShapeMismatch
from .tensor import Tensor

ZERO_TOL = 1e-9
UNKNOWN_LABEL = "Unknown"


def format_relation_value(value: float, tol: float = ZERO_TOL) -> str:
    if math.isfinite(value) and abs(value - round(value)) < tol:
        return f"{round(value):.0f}"
    return f"{value:.2f}"


def export_relation_csv(
    tensor: Tensor,
    path: Union[str, Path],
    header: Sequence[str],
    dim_labels: Sequence[Sequence[str]],
    *,
    tol: float = ZERO_TOL,
) -> Path:
    """Write the nonzero entries of ``tensor`` as a labelled relation table.

    Each line holds one label per axis followed by the value. ``header`` must
    name every axis plus the value column and ``dim_labels`` must carry one
    label list per axis. Indices past the end of a label list are written as
    ``Unknown``. Missing parent directories are created.
    """
    if len(dim_labels) != tensor.rank:
        raise ShapeMismatch(
            f"Tensor has rank {tensor.rank} but {len(dim_labels)} label list(s) were given",
            expected=tensor.rank,
            actual=len(dim_labels),
        )
    if len(header) != tensor.rank + 1:
        raise ShapeMismatch(
            f"Header has {len(header)} column(s); expected {tensor.rank + 1} "
            f"(one per axis plus the value)",
            expected=tensor.rank + 1,
            actual=len(header),
        )

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        handle.write(",".join(header) + "\n")
        for coordinate, value in tensor.nonzero(tol):
            row = []
            for axis, index in enumerate(coordinate):
                labels = dim_labels[axis]
                row.append(str(labels[index]) if index < len(labels) else UNKNOWN_LABEL)
            row.append(format_relation_value(value, tol))
            handle.write(",".join(row) + "\n")
    return target
