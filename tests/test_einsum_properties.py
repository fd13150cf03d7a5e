import numpy as np
import pytest

from einsum_tensor import Tensor, einsum

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

_SYMBOLS = list("ijkl")


@st.composite
def contractions(draw):
    sizes = {symbol: draw(st.integers(min_value=1, max_value=3)) for symbol in _SYMBOLS}
    n_operands = draw(st.integers(min_value=1, max_value=3))
    groups = [
        "".join(draw(st.lists(st.sampled_from(_SYMBOLS), min_size=0, max_size=3)))
        for _ in range(n_operands)
    ]
    used = list(dict.fromkeys("".join(groups)))
    output = "".join(draw(st.permutations(used))[: draw(st.integers(0, len(used)))])
    seed = draw(st.integers(min_value=0, max_value=2**16))
    rng = np.random.default_rng(seed)
    arrays = [rng.integers(-3, 4, size=[sizes[s] for s in group]).astype(np.float64) for group in groups]
    return f"{','.join(groups)}->{output}", arrays


@settings(max_examples=60, deadline=None)
@given(contractions())
def test_reference_engine_agrees_with_numpy_einsum(case):
    formula, arrays = case
    result = einsum(formula, [Tensor.from_numpy(arr) for arr in arrays])
    expected = np.einsum(formula, *arrays)
    np.testing.assert_allclose(result.to_numpy(), expected)


@settings(max_examples=40, deadline=None)
@given(contractions())
def test_full_reduction_equals_sum_of_partial_outputs(case):
    formula, arrays = case
    inputs = formula.split("->")[0]
    tensors = [Tensor.from_numpy(arr) for arr in arrays]
    partial = einsum(formula, tensors)
    total = einsum(f"{inputs}->", tensors)
    assert total.get(()) == pytest.approx(float(partial.data.sum()))
