from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .core.display import format_nonzero
from .core.engine import BACKENDS, ContractionEngine, ExecutionConfig
from .core.exceptions import EinsumError
from .core.export import export_relation_csv
from .core.io import read_tensor_from_file, write_tensor_to_file
from .core.tensor import Tensor
from .logic import TEMPLATES


def _load_tensor(path: Path) -> Tensor:
    try:
        return read_tensor_from_file(path)
    except FileNotFoundError as exc:
        raise SystemExit(f"Tensor file not found: {path}") from exc


def _split_labels(text: str) -> List[str]:
    return [item.strip() for item in text.split(",")]


def _write_output(
    path: Path,
    tensor: Tensor,
    header: Optional[str],
    labels: Optional[List[str]],
) -> Path:
    if path.suffix.lower() == ".csv":
        if header is None or labels is None:
            raise SystemExit("CSV output requires --header and one --labels per axis")
        return export_relation_csv(
            tensor,
            path,
            _split_labels(header),
            [_split_labels(group) for group in labels],
        )
    return write_tensor_to_file(path, tensor)


def _run(args: argparse.Namespace) -> None:
    engine = ContractionEngine(ExecutionConfig(backend=args.backend))
    operands = [_load_tensor(path) for path in args.inputs]
    result = engine.contract(args.formula, operands)
    if args.out is None:
        print(format_nonzero(result))
    else:
        written = _write_output(args.out, result, args.header, args.labels)
        print(f"Exported: {written}")
    if args.explain:
        print(engine.explain())


def _demo(args: argparse.Namespace) -> None:
    engine = ContractionEngine(ExecutionConfig(backend=args.backend))
    out_dir: Path = args.out_dir
    names = args.cases or list(TEMPLATES)
    unknown = [name for name in names if name not in TEMPLATES]
    if unknown:
        raise SystemExit(f"Unknown template(s): {', '.join(unknown)}")
    for name in names:
        case = TEMPLATES[name]()
        print(f"\n=== {case.title} ===")
        print(case.description)
        for table in case.tables.values():
            print(f"Input: {table.name}")
            print(format_nonzero(table.tensor))
            print(f"Exported: {table.export_csv(out_dir)}")
        conclusion = case.run(engine)
        print(f"Output: {conclusion.name} = einsum('{case.formula}')")
        print(format_nonzero(conclusion.tensor))
        print(f"Exported: {conclusion.export_csv(out_dir)}")
    if args.explain:
        print(engine.explain())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="einsum-tensor command line utilities")
    subparsers = parser.add_subparsers(dest="cmd")

    run_parser = subparsers.add_parser("run", help="Contract tensor files with an einsum formula")
    run_parser.add_argument("formula", help="Subscript formula, e.g. 'ij,jk->ik'")
    run_parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Operand tensors (.json nested lists or .npy), in formula order",
    )
    run_parser.add_argument(
        "--backend",
        default="reference",
        choices=list(BACKENDS),
        help="Contraction backend to use (default: reference)",
    )
    run_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Optional output path (.json/.npy/.csv). If omitted, prints nonzero entries",
    )
    run_parser.add_argument(
        "--header",
        default=None,
        help="Comma-separated CSV header: one label per axis plus the value column",
    )
    run_parser.add_argument(
        "--labels",
        action="append",
        default=None,
        help="Comma-separated labels for one axis; repeat once per axis",
    )
    run_parser.add_argument("--explain", action="store_true", help="Print the contraction log")

    demo_parser = subparsers.add_parser("demo", help="Run the built-in reasoning templates")
    demo_parser.add_argument(
        "cases",
        nargs="*",
        help=f"Templates to run: {', '.join(TEMPLATES)} (default: all)",
    )
    demo_parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("."),
        help="Directory for the exported relation CSV files (default: current directory)",
    )
    demo_parser.add_argument(
        "--backend",
        default="reference",
        choices=list(BACKENDS),
        help="Contraction backend to use (default: reference)",
    )
    demo_parser.add_argument("--explain", action="store_true", help="Print the contraction log")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd == "run":
            _run(args)
            return
        if args.cmd == "demo":
            _demo(args)
            return
    except EinsumError as exc:
        raise SystemExit(f"{type(exc).__name__}: {exc}") from exc

    parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
