from __future__ import annotations

import runpy
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.mark.parametrize(
    "example_path",
    sorted(EXAMPLES_DIR.glob("*.py"), key=lambda p: p.name),
    ids=lambda p: p.name,
)
def test_examples_run(example_path: Path, tmp_path: Path, monkeypatch, capsys) -> None:
    # Run from a scratch directory so exported files stay out of the tree
    monkeypatch.chdir(tmp_path)
    runpy.run_path(str(example_path), run_name="__main__")
    out = capsys.readouterr().out
    assert "[perf]" in out
