from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import BackendError
from .formula import Binding, Formula, bind_formula, parse_formula
from .stats import compute_einsum_stats
from .tensor import Tensor

BACKENDS = ("reference", "numpy")


def _json_ready(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (np.integer, np.floating)):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, dict):
        return {str(k): _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_json_ready(v) for v in value]
    return str(value)


@dataclass(frozen=True)
class ExecutionConfig:
    """
    Switches shared by every contraction an engine runs.

    * ``backend`` selects ``"reference"`` (the mixed-radix enumeration over
      every symbol) or ``"numpy"`` (validated here, executed by ``numpy.einsum``).
    * ``explain_timings`` records wall-clock durations in the engine logs.
    * ``zero_tol`` is the magnitude below which entries count as zero when the
      engine reports nonzero counts.
    * ``max_states`` caps the size of the enumerated product space; larger
      contractions are rejected before any work starts.
    """

    backend: str = "reference"  # "reference" | "numpy"
    explain_timings: bool = True
    zero_tol: float = 1e-9
    max_states: Optional[int] = None

    def normalized(self) -> "ExecutionConfig":
        backend = (self.backend or "reference").strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"Unsupported backend: {self.backend}")
        zero_tol = float(self.zero_tol)
        if zero_tol < 0:
            raise ValueError("zero_tol must be non-negative")
        max_states = self.max_states
        if max_states is not None:
            max_states = int(max_states)
            if max_states <= 0:
                raise ValueError("max_states must be positive when provided")
        return replace(
            self,
            backend=backend,
            explain_timings=bool(self.explain_timings),
            zero_tol=zero_tol,
            max_states=max_states,
        )


def _coerce_operands(operands: Sequence[Any]) -> List[Tensor]:
    if isinstance(operands, (Tensor, np.ndarray)):
        raise TypeError("Operands must be passed as a sequence of tensors")
    tensors: List[Tensor] = []
    for idx, operand in enumerate(operands):
        if isinstance(operand, Tensor):
            tensors.append(operand)
        elif isinstance(operand, np.ndarray):
            tensors.append(Tensor.from_numpy(operand))
        else:
            raise TypeError(
                f"Operand {idx} must be a Tensor or numpy array, got {type(operand).__name__}"
            )
    return tensors


def _contract_reference(binding: Binding, operands: Sequence[Tensor]) -> Tuple[Tensor, int]:
    positions = binding.positions
    operand_slots = [tuple(positions[s] for s in group) for group in binding.formula.inputs]
    output_slots = tuple(positions[s] for s in binding.formula.output)
    limits = binding.limits

    result = Tensor.zeros(binding.output_shape)
    if any(limit == 0 for limit in limits):
        return result, 0

    counters = [0] * len(limits)
    visited = 0
    while True:
        product = 1.0
        for tensor, slots in zip(operands, operand_slots):
            product *= tensor.get([counters[slot] for slot in slots])
        out_coord = [counters[slot] for slot in output_slots]
        result.set(out_coord, result.get(out_coord) + product)
        visited += 1

        # Mixed-radix increment, last symbol fastest.
        carry = True
        for pos in range(len(counters) - 1, -1, -1):
            counters[pos] += 1
            if counters[pos] < limits[pos]:
                carry = False
                break
            counters[pos] = 0
        if carry:
            break
    return result, visited


def _contract_numpy(binding: Binding, operands: Sequence[Tensor]) -> Tensor:
    output = binding.formula.output
    if len(set(output)) != len(output):
        raise BackendError(
            f"NumPy backend does not support repeated output symbols in '{binding.formula}'"
        )
    arrays = [tensor.to_numpy() for tensor in operands]
    raw = np.einsum(str(binding.formula), *arrays)
    return Tensor(binding.output_shape, np.asarray(raw, dtype=np.float64))


class ContractionEngine:
    """Run einsum contractions and keep a log of every call.

    Example::

        engine = ContractionEngine()
        closure = engine("ij,jk->ik", [relation, relation])
        print(engine.explain())
    """

    def __init__(self, config: Optional[ExecutionConfig] = None):
        self.config = (config or ExecutionConfig()).normalized()
        self.logs: List[Dict[str, Any]] = []

    def __call__(self, formula: Union[str, Formula], operands: Sequence[Any]) -> Tensor:
        return self.contract(formula, operands)

    def contract(self, formula: Union[str, Formula], operands: Sequence[Any]) -> Tensor:
        cfg = self.config
        parsed = formula if isinstance(formula, Formula) else parse_formula(formula)
        tensors = _coerce_operands(operands)
        shapes = [tensor.shape for tensor in tensors]
        binding = bind_formula(parsed, shapes)
        stats = compute_einsum_stats(binding, shapes)
        if cfg.max_states is not None and stats["states"] > cfg.max_states:
            raise BackendError(
                f"Contraction '{parsed}' enumerates {stats['states']} states, "
                f"above max_states={cfg.max_states}"
            )

        start = time.perf_counter() if cfg.explain_timings else None
        if cfg.backend == "numpy":
            result = _contract_numpy(binding, tensors)
            visited = stats["states"]
        else:
            result, visited = _contract_reference(binding, tensors)
        duration_ms = (time.perf_counter() - start) * 1000.0 if start is not None else None

        self._log_contraction(binding, shapes, result, stats, visited, duration_ms)
        return result

    def _log_contraction(
        self,
        binding: Binding,
        shapes: Sequence[Tuple[int, ...]],
        result: Tensor,
        stats: Dict[str, Any],
        visited: int,
        duration_ms: Optional[float],
    ) -> None:
        nonzero = sum(1 for _ in result.nonzero(self.config.zero_tol))
        entry = {
            "kind": "contraction",
            "contraction": {
                "formula": str(binding.formula),
                "backend": self.config.backend,
                "operand_shapes": [list(shape) for shape in shapes],
                "output_shape": list(result.shape),
                "sizes": dict(binding.sizes),
                "order": list(binding.order),
                "contracted": stats["contracted"],
                "output_indices": stats["output_indices"],
                "states": visited,
                "flops": stats["flops"],
                "bytes_total": stats["bytes_total"],
                "bytes_in": stats["bytes_in"],
                "bytes_out": stats["bytes_out"],
                "reductions": stats["reductions"],
                "nonzero": nonzero,
                "duration_ms": duration_ms,
            },
        }
        self.logs.append(entry)

    def explain(self, *, json: bool = False):
        total_time_ms = 0.0
        total_flops = 0.0
        total_bytes = 0.0
        durations: List[Tuple[str, float]] = []

        def _format_metric(value: Optional[float], unit: str) -> Optional[str]:
            if value is None:
                return None
            magnitude = float(value)
            if magnitude == 0:
                return f"{unit}=0"
            suffixes = [
                (1e12, "T"),
                (1e9, "G"),
                (1e6, "M"),
                (1e3, "K"),
            ]
            for threshold, label in suffixes:
                if magnitude >= threshold:
                    return f"{unit}={magnitude / threshold:.2f}{label}"
            return f"{unit}={magnitude:.2f}"

        lines: List[str] = []
        for entry in self.logs:
            if entry.get("kind") != "contraction":
                continue
            info = entry["contraction"]
            shapes = "x".join(str(tuple(shape)) for shape in info["operand_shapes"])
            details: List[str] = [
                f"backend={info['backend']}",
                f"states={info['states']}",
            ]
            contracted = info.get("contracted") or []
            details.append(f"summed={','.join(contracted) if contracted else '-'}")
            flops_str = _format_metric(info.get("flops"), "flops")
            bytes_str = _format_metric(info.get("bytes_total"), "bytes")
            if flops_str:
                details.append(flops_str)
            if bytes_str:
                details.append(bytes_str)
            details.append(f"nnz={info['nonzero']}")
            duration = info.get("duration_ms")
            if duration is not None:
                total_time_ms += float(duration)
                durations.append((info["formula"], float(duration)))
            total_flops += float(info.get("flops") or 0.0)
            total_bytes += float(info.get("bytes_total") or 0.0)
            timing = f" {duration:.3f}ms" if duration is not None else ""
            lines.append(
                f"[einsum] {info['formula']} {shapes} -> {tuple(info['output_shape'])}"
                f"{timing} {' '.join(details)}"
            )

        perf_summary: Optional[Dict[str, Any]] = None
        if self.logs:
            perf_summary = {
                "contractions": len(self.logs),
                "total_ms": total_time_ms if durations else None,
                "total_flops": total_flops or None,
                "total_bytes": total_bytes or None,
            }
            summary_parts: List[str] = [f"contractions={len(self.logs)}"]
            if durations:
                summary_parts.insert(0, f"total={total_time_ms:.3f}ms")
                slowest = max(durations, key=lambda item: item[1])
                perf_summary["max_contraction"] = {"formula": slowest[0], "duration_ms": slowest[1]}
            flops_summary = _format_metric(total_flops if total_flops else None, "flops")
            bytes_summary = _format_metric(total_bytes if total_bytes else None, "bytes")
            if flops_summary:
                summary_parts.append(flops_summary)
            if bytes_summary:
                summary_parts.append(bytes_summary)
            if durations:
                summary_parts.append(f"max={slowest[0]}({slowest[1]:.3f}ms)")
            lines.append(f"[perf] {' '.join(summary_parts)}")

        if json:
            payload: Dict[str, Any] = {"logs": [_json_ready(entry) for entry in self.logs]}
            if perf_summary is not None:
                payload["summary"] = _json_ready(perf_summary)
            return payload

        return "\n".join(lines)


def einsum(
    formula: Union[str, Formula],
    operands: Sequence[Any],
    *,
    config: Optional[ExecutionConfig] = None,
) -> Tensor:
    """Contract ``operands`` according to ``formula`` and return a new tensor.

    Every distinct symbol is enumerated over its full range and the product of
    the addressed operand entries is accumulated into the output coordinate
    named by the output symbols, so symbols missing from the output are summed.
    All validation happens before any work: a failing call never yields a
    partial result.

    >>> a = Tensor.from_rows([[1, 2], [3, 4]])
    >>> einsum("ij->", [a]).get(())
    10.0
    """
    return ContractionEngine(config).contract(formula, operands)
