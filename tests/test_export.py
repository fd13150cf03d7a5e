import pytest

from einsum_tensor import ShapeMismatch, Tensor, einsum, export_relation_csv
from einsum_tensor.core.export import format_relation_value


def test_single_relation_row(tmp_path):
    tensor = Tensor.zeros((2, 2))
    tensor.set((0, 1), 2.0)
    path = tmp_path / "relation.csv"

    written = export_relation_csv(tensor, path, ["Subj", "Obj", "Value"], [["A", "B"], ["X", "Y"]])

    assert written == path
    assert path.read_text(encoding="utf-8").splitlines() == ["Subj,Obj,Value", "A,Y,2"]


def test_creates_missing_directories(tmp_path):
    tensor = Tensor.from_rows([[1.0]])
    path = tmp_path / "nested" / "deeper" / "out.csv"
    export_relation_csv(tensor, path, ["L", "R", "Value"], [["a"], ["b"]])
    assert path.exists()


def test_missing_labels_render_placeholder(tmp_path):
    tensor = Tensor.zeros((3,))
    tensor.set((2,), 0.5)
    path = tmp_path / "unknown.csv"
    export_relation_csv(tensor, path, ["Item", "Value"], [["first"]])
    assert path.read_text(encoding="utf-8").splitlines()[1] == "Unknown,0.50"


def test_near_zero_entries_are_skipped(tmp_path):
    tensor = Tensor.from_rows([[1e-12, 3.0]])
    path = tmp_path / "skip.csv"
    export_relation_csv(tensor, path, ["R", "C", "Value"], [["r"], ["c0", "c1"]])
    assert path.read_text(encoding="utf-8").splitlines() == ["R,C,Value", "r,c1,3"]


@pytest.mark.parametrize(
    "value, text",
    [(1.0, "1"), (2.0000000001, "2"), (-3.0, "-3"), (0.25, "0.25"), (1.005, "1.00"), (2.5, "2.50")],
)
def test_value_formatting(value, text):
    assert format_relation_value(value) == text


def test_header_length_must_cover_axes_and_value(tmp_path):
    with pytest.raises(ShapeMismatch) as excinfo:
        export_relation_csv(Tensor.zeros((2, 2)), tmp_path / "x.csv", ["A", "B"], [["a"], ["b"]])
    assert excinfo.value.expected == 3
    assert not (tmp_path / "x.csv").exists()


def test_label_lists_must_match_rank(tmp_path):
    with pytest.raises(ShapeMismatch):
        export_relation_csv(Tensor.zeros((2, 2)), tmp_path / "x.csv", ["A", "B", "V"], [["a"]])


def test_infinite_value_is_written_with_two_decimals(tmp_path):
    big = Tensor.from_rows([[1e200, 0.0], [0.0, 0.0]])
    overflowed = einsum("ij,jk->ik", [big, big])
    path = tmp_path / "overflow.csv"

    export_relation_csv(overflowed, path, ["L", "R", "Value"], [["a", "b"], ["c", "d"]])

    assert path.read_text(encoding="utf-8").splitlines() == ["L,R,Value", "a,c,inf"]
    assert format_relation_value(float("-inf")) == "-inf"
