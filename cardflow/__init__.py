#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Cardflow - visual analysis workflow engine.

Graph model, validation, layout, undo/redo, clipboard and sequential
multi-symbol execution for card-based analysis workflows.
"""

__version__ = "0.1.0"
