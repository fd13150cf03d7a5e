import numpy as np

from einsum_tensor import ContractionEngine, ExecutionConfig, Tensor, print_tensor

# Query/key scores, value mixing and a batched trace, all through one primitive.
rng = np.random.default_rng(0)
Q = Tensor.from_numpy(rng.standard_normal((4, 3)))
K = Tensor.from_numpy(rng.standard_normal((4, 3)))
V = Tensor.from_numpy(rng.standard_normal((4, 2)))

engine = ContractionEngine(ExecutionConfig(backend="reference"))
scores = engine("pd,qd->pq", [Q, K])
mixed = engine("pq,qv->pv", [scores, V])
traces = engine("bii->b", [Tensor.from_numpy(rng.standard_normal((2, 3, 3)))])

print_tensor(scores)
print_tensor(mixed)
print("Traces:", traces.tolist())

check = ContractionEngine(ExecutionConfig(backend="numpy"))("pd,qd,qv->pv", [Q, K, V])
print("Backends agree:", check.allclose(mixed, tol=1e-9))
print(engine.explain())
