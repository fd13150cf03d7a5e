import pytest

from einsum_tensor import ContractionEngine, ExecutionConfig
from einsum_tensor.logic import (
    TEMPLATES,
    all_cases,
    contextual_inference,
    syllogism,
    transitivity,
)


def _labelled_rows(table):
    rows = []
    for coordinate, value in table.tensor.nonzero():
        rows.append(tuple(table.labels[axis][idx] for axis, idx in enumerate(coordinate)) + (value,))
    return rows


def test_transitivity_derives_one_le_three():
    conclusion = transitivity().run()
    assert _labelled_rows(conclusion) == [("1", "3", 1.0)]


def test_syllogism_cuts_out_concept_axis():
    case = syllogism()
    conclusion = case.run()
    assert conclusion.header == ("Subject", "Quality", "Value")
    assert _labelled_rows(conclusion) == [("Socrates", "Mortal", 1.0), ("Zeus", "Immortal", 1.0)]


def test_contextual_inference_keeps_contexts_apart():
    conclusion = contextual_inference().run()
    assert _labelled_rows(conclusion) == [("Alice", "Charlie", "Official", 1.0)]


@pytest.mark.parametrize("backend", ["reference", "numpy"])
def test_templates_run_on_each_backend(backend):
    engine = ContractionEngine(ExecutionConfig(backend=backend))
    for case in all_cases():
        case.run(engine)
    assert len(engine.logs) == len(TEMPLATES)


def test_tables_export_relation_csv(tmp_path):
    case = syllogism()
    paths = [table.export_csv(tmp_path) for table in case.tables.values()]
    conclusion_path = case.run().export_csv(tmp_path / "derived")
    assert [p.name for p in paths] == ["syllogism_facts.csv", "syllogism_rules.csv"]
    assert conclusion_path.read_text(encoding="utf-8").splitlines() == [
        "Subject,Quality,Value",
        "Socrates,Mortal,1",
        "Zeus,Immortal,1",
    ]
