#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Clipboard - copy, paste, duplicate and delete over induced subgraphs.

The clipboard slot belongs to one editor session. Only copy() writes it;
paste(), duplicate() and delete_selected() are pure over their inputs and
return a new GraphState for the caller to apply.
"""

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .models import Edge, GraphState, Node, clone_edges, clone_nodes, generate_id
from cardflow.core import get_logger


DEFAULT_OFFSET: Tuple[float, float] = (50.0, 50.0)

IdFactory = Callable[[Iterable[str]], str]


def induced_edges(node_ids: Set[str], edges: Sequence[Edge]) -> List[Edge]:
    """Edges whose source and target are both in node_ids."""
    return [e for e in edges if e.source in node_ids and e.target in node_ids]


class Clipboard:
    """
    Session-scoped clipboard holding at most one copied subgraph.

    Example:
        clipboard = Clipboard()
        clipboard.copy(graph.selected_nodes, graph.edges)
        pasted = clipboard.paste(graph.nodes, graph.edges)
        if pasted:
            graph.replace(pasted.nodes, pasted.edges)
    """

    def __init__(self, id_factory: Optional[IdFactory] = None):
        """
        Initialize an empty clipboard.

        Args:
            id_factory: Callable taking the ids already in use and returning
                a fresh one (default: generate_id)
        """
        self._payload: Optional[GraphState] = None
        self._id_factory = id_factory or generate_id
        self.logger = get_logger(__name__)

    @property
    def has_content(self) -> bool:
        return self._payload is not None

    @property
    def payload(self) -> Optional[GraphState]:
        """A copy of the stored subgraph, or None."""
        return self._payload.copy() if self._payload is not None else None

    def clear(self) -> None:
        self._payload = None

    def copy(self, selected_nodes: Sequence[Node], all_edges: Sequence[Edge]) -> int:
        """
        Store the subgraph induced by the selection.

        An empty selection leaves the clipboard untouched.

        Returns:
            Number of nodes copied
        """
        if not selected_nodes:
            return 0
        selected_ids = {n.id for n in selected_nodes}
        self._payload = GraphState(
            nodes=clone_nodes(selected_nodes),
            edges=clone_edges(induced_edges(selected_ids, all_edges)),
        )
        self.logger.debug(
            f"Copied {len(self._payload.nodes)} node(s), {len(self._payload.edges)} edge(s)"
        )
        return len(selected_nodes)

    def paste(
        self,
        existing_nodes: Sequence[Node],
        existing_edges: Sequence[Edge],
        offset: Tuple[float, float] = DEFAULT_OFFSET
    ) -> Optional[GraphState]:
        """
        Insert a freshly-identified copy of the clipboard.

        Returns:
            Existing + pasted nodes/edges, or None if the clipboard is empty
        """
        if self._payload is None:
            return None
        return self._remap_into(
            self._payload.nodes, self._payload.edges,
            existing_nodes, existing_edges, offset,
        )

    def duplicate(
        self,
        selected_nodes: Sequence[Node],
        all_nodes: Sequence[Node],
        all_edges: Sequence[Edge],
        offset: Tuple[float, float] = DEFAULT_OFFSET
    ) -> Optional[GraphState]:
        """
        Copy and paste the live selection in one step.

        The clipboard slot is not touched.

        Returns:
            All nodes/edges plus the duplicates, or None for an empty selection
        """
        if not selected_nodes:
            return None
        selected_ids = {n.id for n in selected_nodes}
        return self._remap_into(
            selected_nodes, induced_edges(selected_ids, all_edges),
            all_nodes, all_edges, offset,
        )

    def delete_selected(
        self,
        selected_nodes: Sequence[Node],
        all_nodes: Sequence[Node],
        all_edges: Sequence[Edge]
    ) -> GraphState:
        """Remove the selected nodes and every edge touching them."""
        selected_ids = {n.id for n in selected_nodes}
        return GraphState(
            nodes=[n for n in all_nodes if n.id not in selected_ids],
            edges=[e for e in all_edges if e.source not in selected_ids and e.target not in selected_ids],
        )

    def _remap_into(
        self,
        source_nodes: Sequence[Node],
        source_edges: Sequence[Edge],
        existing_nodes: Sequence[Node],
        existing_edges: Sequence[Edge],
        offset: Tuple[float, float]
    ) -> GraphState:
        dx, dy = offset
        taken = {n.id for n in existing_nodes} | {e.id for e in existing_edges}

        id_map: Dict[str, str] = {}
        for node in source_nodes:
            new_id = self._id_factory(taken)
            taken.add(new_id)
            id_map[node.id] = new_id

        new_nodes = [
            node.reset_transient().model_copy(
                update={
                    "id": id_map[node.id],
                    "position": node.position.offset(dx, dy),
                    "selected": True,
                },
                deep=True,
            )
            for node in source_nodes
        ]

        new_edges = []
        for edge in source_edges:
            new_id = self._id_factory(taken)
            taken.add(new_id)
            new_edges.append(edge.model_copy(update={
                "id": new_id,
                "source": id_map[edge.source],
                "target": id_map[edge.target],
            }))

        deselected = [n.model_copy(update={"selected": False}) for n in existing_nodes]
        self.logger.debug(f"Inserted {len(new_nodes)} node(s), {len(new_edges)} edge(s)")
        return GraphState(
            nodes=deselected + new_nodes,
            edges=list(existing_edges) + new_edges,
        )
