from __future__ import annotations

from typing import Any, Dict, Sequence

from .formula import Binding
from .indexing import prod

ITEMSIZE = 8  # float64


def compute_einsum_stats(
    binding: Binding,
    operand_shapes: Sequence[Sequence[int]],
) -> Dict[str, Any]:
    states = prod(binding.limits)
    operands = len(operand_shapes)
    output_size = prod(binding.output_shape)

    # One multiply per extra operand plus one accumulate, per visited state.
    flops = float(states * max(operands, 1))
    reductions = int(max(states - output_size, 0)) if output_size else 0

    bytes_in = sum(prod(shape) * ITEMSIZE for shape in operand_shapes)
    bytes_out = output_size * ITEMSIZE

    return {
        "states": int(states),
        "flops": flops,
        "bytes_in": int(bytes_in),
        "bytes_out": int(bytes_out),
        "bytes_total": int(bytes_in + bytes_out),
        "contracted": list(binding.contracted),
        "output_indices": list(binding.output_symbols),
        "reductions": reductions,
    }
