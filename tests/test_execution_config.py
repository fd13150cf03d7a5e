import pytest

from einsum_tensor import ContractionEngine, ExecutionConfig


def test_execution_config_normalization():
    cfg = ExecutionConfig(backend=" NumPy ", explain_timings=0, zero_tol="1e-6", max_states="10")
    cfg = cfg.normalized()
    assert cfg.backend == "numpy"
    assert cfg.explain_timings is False
    assert cfg.zero_tol == 1e-6
    assert cfg.max_states == 10


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"backend": "cuda"}, "Unsupported backend"),
        ({"zero_tol": -1.0}, "zero_tol"),
        ({"max_states": 0}, "max_states"),
    ],
)
def test_execution_config_rejects_invalid_values(kwargs, message):
    with pytest.raises(ValueError, match=message):
        ExecutionConfig(**kwargs).normalized()


def test_engine_normalizes_its_config():
    engine = ContractionEngine(ExecutionConfig(backend="REFERENCE"))
    assert engine.config.backend == "reference"
