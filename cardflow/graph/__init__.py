#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Workflow graph model and the pure editing algorithms built on it.
"""

from .models import (
    Position,
    CardNodeData,
    ConditionNodeData,
    MergeNodeData,
    Node,
    Edge,
    CardDescriptor,
    GraphState,
    generate_id,
    card_node,
    logic_node,
)
from .graph import WorkflowGraph
from .validator import ValidationIssue, ValidationResult, validate_workflow, run_gate
from .layout import LayoutOptions, assign_levels, auto_layout
from .history import HistoryManager, HistorySnapshot
from .clipboard import Clipboard, induced_edges

__all__ = [
    'Position',
    'CardNodeData',
    'ConditionNodeData',
    'MergeNodeData',
    'Node',
    'Edge',
    'CardDescriptor',
    'GraphState',
    'generate_id',
    'card_node',
    'logic_node',
    'WorkflowGraph',
    'ValidationIssue',
    'ValidationResult',
    'validate_workflow',
    'run_gate',
    'LayoutOptions',
    'assign_levels',
    'auto_layout',
    'HistoryManager',
    'HistorySnapshot',
    'Clipboard',
    'induced_edges',
]
