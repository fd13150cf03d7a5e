import pytest
from hypothesis import given
from hypothesis import strategies as st

from einsum_tensor import OutOfRange, RankMismatch, coordinate_of, flat_of, strides


@st.composite
def shapes_and_coordinates(draw):
    shape = draw(st.lists(st.integers(min_value=1, max_value=5), min_size=0, max_size=4))
    coordinate = [draw(st.integers(min_value=0, max_value=size - 1)) for size in shape]
    return tuple(shape), tuple(coordinate)


@given(shapes_and_coordinates())
def test_coordinate_round_trip(case):
    shape, coordinate = case
    assert coordinate_of(shape, flat_of(shape, coordinate)) == coordinate


def test_last_axis_varies_fastest():
    shape = (2, 3, 4)
    assert strides(shape) == (12, 4, 1)
    assert flat_of(shape, (0, 0, 1)) == 1
    assert flat_of(shape, (0, 1, 0)) == 4
    assert flat_of(shape, (1, 0, 0)) == 12
    assert flat_of(shape, (1, 2, 3)) == 23
    assert coordinate_of(shape, 23) == (1, 2, 3)


def test_rank_zero_maps_to_single_offset():
    assert flat_of((), ()) == 0
    assert coordinate_of((), 0) == ()


def test_rank_mismatch_reports_lengths():
    with pytest.raises(RankMismatch) as excinfo:
        flat_of((2, 3), (1,))
    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 1


@pytest.mark.parametrize("coordinate, axis", [((2, 0), 0), ((0, 3), 1), ((0, -1), 1)])
def test_out_of_range_names_axis(coordinate, axis):
    with pytest.raises(OutOfRange) as excinfo:
        flat_of((2, 3), coordinate)
    assert excinfo.value.axis == axis
    assert isinstance(excinfo.value, IndexError)


@pytest.mark.parametrize("component", [1.9, 1.0, "1"])
def test_non_integer_components_are_rejected(component):
    with pytest.raises(TypeError):
        flat_of((2, 3), (0, component))


def test_numpy_integer_components_are_accepted():
    np = pytest.importorskip("numpy")
    assert flat_of((2, 3), (np.int64(1), np.int32(2))) == 5
