"""
Reasoning templates that express logical inference as tensor contraction.

Each template returns a :class:`ReasoningCase`: labelled relation tensors plus
the einsum formula that derives a conclusion from them. Joining two relations
on a shared symbol and summing it away is the tensor form of composing rules,
so ``R[x,y] R[y,z] -> R2[x,z]`` derives every two-step consequence of ``R``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..core.engine import ContractionEngine
from ..core.export import export_relation_csv
from ..core.tensor import Tensor

__all__ = [
    "RelationTable",
    "ReasoningCase",
    "transitivity",
    "syllogism",
    "contextual_inference",
    "TEMPLATES",
    "all_cases",
]


@dataclass
class RelationTable:
    name: str
    tensor: Tensor
    header: Tuple[str, ...]
    labels: Tuple[Tuple[str, ...], ...]

    def export_csv(self, directory: Union[str, Path]) -> Path:
        return export_relation_csv(
            self.tensor,
            Path(directory) / f"{self.name}.csv",
            self.header,
            self.labels,
        )


@dataclass
class ReasoningCase:
    title: str
    description: str
    formula: str
    tables: Dict[str, RelationTable]
    operands: Tuple[str, ...]
    conclusion_name: str
    conclusion_header: Tuple[str, ...]
    conclusion_labels: Tuple[Tuple[str, ...], ...]

    def run(self, engine: Optional[ContractionEngine] = None) -> RelationTable:
        engine = engine or ContractionEngine()
        tensors = [self.tables[name].tensor for name in self.operands]
        derived = engine.contract(self.formula, tensors)
        return RelationTable(
            name=self.conclusion_name,
            tensor=derived,
            header=self.conclusion_header,
            labels=self.conclusion_labels,
        )


def _labels(*groups: Sequence[str]) -> Tuple[Tuple[str, ...], ...]:
    return tuple(tuple(group) for group in groups)


def transitivity() -> ReasoningCase:
    """Partial order 1 <= 2, 2 <= 3 composed with itself derives 1 <= 3."""
    values = ("1", "2", "3")
    relation = Tensor.zeros((3, 3))
    relation.set((0, 1), 1.0)
    relation.set((1, 2), 1.0)
    header = ("LHS", "RHS", "Value")
    return ReasoningCase(
        title="Transitivity",
        description="R x R represents the transitive step A->B->C.",
        formula="ij,jk->ik",
        tables={
            "transitivity_input": RelationTable(
                "transitivity_input", relation, header, _labels(values, values)
            )
        },
        operands=("transitivity_input", "transitivity_input"),
        conclusion_name="transitivity_output",
        conclusion_header=header,
        conclusion_labels=_labels(values, values),
    )


def syllogism() -> ReasoningCase:
    """Socrates is human and humans are mortal; the concept axis is cut out."""
    subjects = ("Socrates", "Zeus")
    concepts = ("Human", "God")
    qualities = ("Mortal", "Immortal")
    facts = Tensor.from_rows(
        [
            [1.0, 0.0],  # Socrates -> Human
            [0.0, 1.0],  # Zeus -> God
        ]
    )
    rules = Tensor.from_rows(
        [
            [1.0, 0.0],  # Human -> Mortal
            [0.0, 1.0],  # God -> Immortal
        ]
    )
    return ReasoningCase(
        title="Syllogism",
        description="Contracting over the concept axis is cut elimination.",
        formula="sc,cq->sq",
        tables={
            "syllogism_facts": RelationTable(
                "syllogism_facts",
                facts,
                ("Subject", "Concept", "Value"),
                _labels(subjects, concepts),
            ),
            "syllogism_rules": RelationTable(
                "syllogism_rules",
                rules,
                ("Concept", "Quality", "Value"),
                _labels(concepts, qualities),
            ),
        },
        operands=("syllogism_facts", "syllogism_rules"),
        conclusion_name="syllogism_conclusion",
        conclusion_header=("Subject", "Quality", "Value"),
        conclusion_labels=_labels(subjects, qualities),
    )


def contextual_inference() -> ReasoningCase:
    """Relations indexed by context; composition never mixes contexts.

    In the official context Alice manages Bob who manages Charlie, so the
    two-step relation Alice -> Charlie holds there. The private context only
    links Bob and Charlie and derives nothing.
    """
    people = ("Alice", "Bob", "Charlie")
    contexts = ("Official", "Private")
    relation = Tensor.zeros((3, 3, 2))
    relation.set((0, 1, 0), 1.0)
    relation.set((1, 2, 0), 1.0)
    relation.set((1, 2, 1), 1.0)
    header = ("Subject", "Object", "Context", "Value")
    labels = _labels(people, people, contexts)
    return ReasoningCase(
        title="Contextual inference",
        description="Context is carried as a shared, unsummed tensor axis.",
        formula="xyc,yzc->xzc",
        tables={"contextual_input": RelationTable("contextual_input", relation, header, labels)},
        operands=("contextual_input", "contextual_input"),
        conclusion_name="contextual_output",
        conclusion_header=header,
        conclusion_labels=labels,
    )


TEMPLATES = {
    "transitivity": transitivity,
    "syllogism": syllogism,
    "contextual": contextual_inference,
}


def all_cases() -> List[ReasoningCase]:
    return [factory() for factory in TEMPLATES.values()]
