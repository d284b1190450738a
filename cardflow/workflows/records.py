#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Serializable workflow records and template definitions.
"""

from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from cardflow.graph.models import Edge, Node, NodeData, Position


OutputMode = Literal["cards", "list", "report"]


class WorkflowRecord(BaseModel):
    """
    A saved workflow: graph, symbols and display settings.

    No schema version is stored; records are read back with the current
    models.
    """

    id: str
    name: str = "Untitled Workflow"
    description: Optional[str] = None
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    output_mode: OutputMode = "cards"
    symbols: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class TemplateNode(BaseModel):
    """Node definition inside a template; ids are assigned on load."""

    position: Position = Field(default_factory=Position)
    data: NodeData


class TemplateEdge(BaseModel):
    """Edge between template nodes, referenced by their list index ("0", "1", ...)."""

    source: str
    target: str
    source_handle: Optional[str] = None


class WorkflowTemplate(BaseModel):
    """A named, prebuilt graph from the template catalog."""

    id: str
    name: str
    description: str = ""
    category: str = "beginner"
    tags: List[str] = Field(default_factory=list)
    nodes: List[TemplateNode] = Field(default_factory=list)
    edges: List[TemplateEdge] = Field(default_factory=list)

    def instantiate(self, symbol: str = "") -> Tuple[List[Node], List[Edge]]:
        """
        Build concrete nodes and edges.

        Node ids are the template indexes ("0", "1", ...), edge ids are
        "e0", "e1", ...; card nodes get ``symbol`` when one is given.
        """
        nodes = []
        for index, definition in enumerate(self.nodes):
            data = definition.data.model_copy(deep=True)
            if data.type == "card" and symbol:
                data = data.model_copy(update={"symbol": symbol})
            nodes.append(Node(id=str(index), position=definition.position.model_copy(), data=data))

        edges = [
            Edge(
                id=f"e{index}",
                source=definition.source,
                target=definition.target,
                source_handle=definition.source_handle,
            )
            for index, definition in enumerate(self.edges)
        ]
        return nodes, edges
