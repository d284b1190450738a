#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Editor sessions, saved records and templates over workflow graphs.
"""

from .records import WorkflowRecord, WorkflowTemplate, TemplateNode, TemplateEdge
from .session import WorkflowSession

__all__ = [
    'WorkflowRecord',
    'WorkflowTemplate',
    'TemplateNode',
    'TemplateEdge',
    'WorkflowSession',
]
