#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Pydantic models for workflow graphs.

Node payloads are a tagged union discriminated by ``data.type``:
card, condition and merge nodes each carry their own data model.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field


NodeKind = Literal["card", "condition", "merge"]
NodeStatus = Literal["idle", "running", "success", "error"]
MergeStrategy = Literal["all", "any", "first"]


def generate_id(existing: Iterable[str] = ()) -> str:
    """
    Generate a short unique identifier.

    Format is ``<millis base16>-<6 hex chars>``. Ids already present in
    ``existing`` are never returned.
    """
    taken = set(existing)
    while True:
        candidate = f"{int(time.time() * 1000):x}-{uuid.uuid4().hex[:6]}"
        if candidate not in taken:
            return candidate


class Position(BaseModel):
    """2D canvas coordinate."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(x=self.x + dx, y=self.y + dy)


class CardNodeData(BaseModel):
    """One invocation of an external analysis card over a symbol."""

    type: Literal["card"] = "card"
    card_id: str = Field(..., description="External card-type identifier")
    label: str = ""
    category: str = ""
    description: str = ""
    symbol: str = ""
    params: Dict[str, str] = Field(default_factory=dict)

    # Transient execution fields
    status: NodeStatus = "idle"
    result: Optional[Any] = None
    error: Optional[str] = None

    def reset(self) -> "CardNodeData":
        """Copy with execution fields cleared."""
        return self.model_copy(update={"status": "idle", "result": None, "error": None})


class ConditionNodeData(BaseModel):
    """Boolean gate over a score threshold with ``true``/``false`` ports."""

    type: Literal["condition"] = "condition"
    label: str = "Condition"
    condition: str = Field(default="score > 70", description="e.g. 'score > 70'")
    true_label: Optional[str] = None
    false_label: Optional[str] = None


class MergeNodeData(BaseModel):
    """Join point for several inbound edges."""

    type: Literal["merge"] = "merge"
    label: str = "Merge"
    merge_strategy: MergeStrategy = "all"


NodeData = Annotated[
    Union[CardNodeData, ConditionNodeData, MergeNodeData],
    Field(discriminator="type"),
]


class Node(BaseModel):
    """A vertex in the workflow graph."""

    id: str = Field(..., frozen=True)
    position: Position = Field(default_factory=Position)
    data: NodeData
    selected: bool = False

    @property
    def kind(self) -> NodeKind:
        return self.data.type

    @property
    def is_card(self) -> bool:
        return self.data.type == "card"

    @property
    def is_logic(self) -> bool:
        return self.data.type in ("condition", "merge")

    @property
    def label(self) -> str:
        return self.data.label or self.data.type

    def reset_transient(self) -> "Node":
        """Copy with card execution fields back to idle."""
        if isinstance(self.data, CardNodeData):
            return self.model_copy(update={"data": self.data.reset()})
        return self.model_copy()


class Edge(BaseModel):
    """Directed connection ``source -> target``."""

    id: str = Field(..., frozen=True)
    source: str
    target: str
    source_handle: Optional[str] = None

    @property
    def variant(self) -> str:
        """Visual classification of the edge for the rendering layer."""
        if self.source_handle == "true":
            return "true_branch"
        if self.source_handle == "false":
            return "false_branch"
        return "gradient"


class CardDescriptor(BaseModel):
    """Display metadata for a card type, supplied by the card catalog."""

    id: str
    label: str
    category: str = ""
    description: str = ""


@dataclass(frozen=True)
class GraphState:
    """An (nodes, edges) pair returned by clipboard and history operations."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def copy(self) -> "GraphState":
        return GraphState(nodes=clone_nodes(self.nodes), edges=clone_edges(self.edges))


def clone_nodes(nodes: Iterable[Node]) -> List[Node]:
    """Deep-copy a node sequence."""
    return [node.model_copy(deep=True) for node in nodes]


def clone_edges(edges: Iterable[Edge]) -> List[Edge]:
    """Deep-copy an edge sequence."""
    return [edge.model_copy(deep=True) for edge in edges]


def card_node(
    node_id: str,
    card_id: str,
    x: float = 0.0,
    y: float = 0.0,
    symbol: str = "",
    **data: Any
) -> Node:
    """Convenience constructor for a card node."""
    return Node(
        id=node_id,
        position=Position(x=x, y=y),
        data=CardNodeData(card_id=card_id, symbol=symbol, **data),
    )


def logic_node(node_id: str, kind: str, x: float = 0.0, y: float = 0.0, **data: Any) -> Node:
    """Convenience constructor for a condition or merge node."""
    if kind == "condition":
        payload = ConditionNodeData(**data)
    elif kind == "merge":
        payload = MergeNodeData(**data)
    else:
        raise ValueError(f"Unknown logic node kind: {kind}")
    return Node(id=node_id, position=Position(x=x, y=y), data=payload)
