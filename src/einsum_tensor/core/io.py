from __future__ import annotations

import json
from pathlib import Path
from typing import Union

import numpy as np

from .tensor import Tensor


def read_tensor_from_file(path: Union[str, Path]) -> Tensor:
    file_path = Path(path)
    ext = file_path.suffix.lower()
    if ext == ".json":
        payload = json.loads(file_path.read_text(encoding="utf-8"))
        return Tensor.from_nested(payload)
    if ext == ".npy":
        return Tensor.from_numpy(np.load(file_path, allow_pickle=False))
    raise ValueError(f"Unsupported tensor file: {file_path}")


def write_tensor_to_file(path: Union[str, Path], tensor: Tensor) -> Path:
    target = Path(path)
    ext = target.suffix.lower()
    if ext not in (".json", ".npy"):
        raise ValueError(f"Unsupported tensor file: {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    if ext == ".npy":
        np.save(target, tensor.to_numpy())
    else:
        target.write_text(json.dumps(tensor.tolist()), encoding="utf-8")
    return target
