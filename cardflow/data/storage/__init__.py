"""
Storage backends for saved workflows.
"""

from .json_store import JSONWorkflowStore

__all__ = [
    'JSONWorkflowStore',
]
