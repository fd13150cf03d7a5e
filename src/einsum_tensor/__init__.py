try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _load_version
except ImportError:  # pragma: no cover
    from importlib_metadata import (  # type: ignore
        PackageNotFoundError,
    )
    from importlib_metadata import (
        version as _load_version,
    )

from . import logic
from .core.display import format_nonzero, format_slices, print_nonzero, print_tensor
from .core.engine import ContractionEngine, ExecutionConfig, einsum
from .core.exceptions import (
    ArityMismatch,
    BackendError,
    DimensionConflict,
    EinsumError,
    OutOfRange,
    ParseError,
    RankMismatch,
    ShapeMismatch,
    UnboundOutputSymbol,
)
from .core.export import export_relation_csv
from .core.formula import Binding, Formula, bind_formula, parse_formula
from .core.indexing import coordinate_of, flat_of, strides
from .core.io import read_tensor_from_file, write_tensor_to_file
from .core.tensor import Tensor

try:
    __version__ = _load_version("einsum-tensor")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Tensor",
    "einsum",
    "ContractionEngine",
    "ExecutionConfig",
    "Formula",
    "Binding",
    "parse_formula",
    "bind_formula",
    "flat_of",
    "coordinate_of",
    "strides",
    "export_relation_csv",
    "format_nonzero",
    "format_slices",
    "print_nonzero",
    "print_tensor",
    "read_tensor_from_file",
    "write_tensor_to_file",
    "EinsumError",
    "ParseError",
    "ArityMismatch",
    "RankMismatch",
    "OutOfRange",
    "DimensionConflict",
    "UnboundOutputSymbol",
    "ShapeMismatch",
    "BackendError",
    "logic",
    "__version__",
]
