#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Workflow Execution Engine

Runs card nodes across symbols and reports per-step results.
"""

from .state import (
    RunReport,
    result_key,
    start_run,
    begin_step,
    apply_step,
    finish_run,
    cancel_run,
    abort_run,
)
from .cancellation import CancellationToken
from .engine import ExecutionEngine

__all__ = [
    'RunReport',
    'result_key',
    'start_run',
    'begin_step',
    'apply_step',
    'finish_run',
    'cancel_run',
    'abort_run',
    'CancellationToken',
    'ExecutionEngine',
]
