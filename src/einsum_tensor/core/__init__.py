"""Core modules for einsum-tensor."""

__all__ = [
    "display",
    "engine",
    "exceptions",
    "export",
    "formula",
    "indexing",
    "io",
    "stats",
    "tensor",
]
