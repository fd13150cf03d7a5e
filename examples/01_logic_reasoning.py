from pathlib import Path

from einsum_tensor import ContractionEngine, print_nonzero
from einsum_tensor.logic import all_cases

OUT_DIR = Path("runs") / "logic"

engine = ContractionEngine()
for case in all_cases():
    print(f"\n=== {case.title} ===")
    print(case.description)
    for table in case.tables.values():
        print_nonzero(table.tensor)
        print("Exported:", table.export_csv(OUT_DIR))
    conclusion = case.run(engine)
    print(f"{case.formula} =>")
    print_nonzero(conclusion.tensor)
    print("Exported:", conclusion.export_csv(OUT_DIR))

print(engine.explain())
