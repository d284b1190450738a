#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Auto-layout via topological layering.

Each node's level is the length of the longest path reaching it from a
node with no inbound edges (Kahn's algorithm). Nodes that no root ever
reaches, such as members of a cycle, fall back to level 0, so the layout
always terminates.
"""

from collections import deque
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from .models import Edge, Node, Position


class LayoutOptions(BaseModel):
    """Spacing and direction of an auto-layout pass."""

    direction: Literal["TB", "LR"] = "TB"
    node_width: float = Field(default=240, gt=0)
    node_height: float = Field(default=140, gt=0)
    horizontal_spacing: float = Field(default=80, ge=0)
    vertical_spacing: float = Field(default=100, ge=0)
    origin_x: float = 300
    origin_y: float = 100


def assign_levels(nodes: Sequence[Node], edges: Sequence[Edge]) -> Dict[str, int]:
    """
    Assign every node a non-negative level.

    Edges with an unknown endpoint are ignored.

    Returns:
        Mapping node id -> level
    """
    successors: Dict[str, List[str]] = {node.id: [] for node in nodes}
    in_degree: Dict[str, int] = {node.id: 0 for node in nodes}

    for edge in edges:
        if edge.source not in successors or edge.target not in in_degree:
            continue
        successors[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    levels: Dict[str, int] = {}
    queue = deque()
    for node in nodes:
        if in_degree[node.id] == 0:
            levels[node.id] = 0
            queue.append(node.id)

    while queue:
        current = queue.popleft()
        next_level = levels[current] + 1
        for neighbor in successors[current]:
            if next_level > levels.get(neighbor, -1):
                levels[neighbor] = next_level
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    # Cycle members are never reached from a root
    for node in nodes:
        levels.setdefault(node.id, 0)

    return levels


def auto_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: Optional[LayoutOptions] = None
) -> List[Node]:
    """
    Compute new positions for every node.

    Pure function: the input nodes are not modified, the returned copies
    differ only in position and keep the input order. Within a level,
    nodes are centred on the cross axis in input order.

    Args:
        nodes: Nodes to lay out
        edges: Edges defining the levels
        options: Spacing/direction (defaults: TB, 240x140 nodes, 80/100 gaps)

    Returns:
        New list of nodes with updated positions
    """
    opts = options or LayoutOptions()
    if not nodes:
        return []

    levels = assign_levels(nodes, edges)

    groups: Dict[int, List[str]] = {}
    for node in nodes:
        groups.setdefault(levels[node.id], []).append(node.id)

    if opts.direction == "TB":
        cross_size, level_size = opts.node_width, opts.node_height
    else:
        cross_size, level_size = opts.node_height, opts.node_width
    cross_step = cross_size + opts.horizontal_spacing
    level_step = level_size + opts.vertical_spacing

    positions: Dict[str, Position] = {}
    for level, members in groups.items():
        span = len(members) * cross_size + (len(members) - 1) * opts.horizontal_spacing
        start = -span / 2 + cross_size / 2
        for index, node_id in enumerate(members):
            cross = start + index * cross_step
            along = level * level_step
            if opts.direction == "TB":
                x, y = cross, along
            else:
                x, y = along, cross
            positions[node_id] = Position(x=x + opts.origin_x, y=y + opts.origin_y)

    return [node.model_copy(update={"position": positions[node.id]}) for node in nodes]
