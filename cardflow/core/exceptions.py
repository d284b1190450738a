#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Custom exceptions for Cardflow.
"""


class CardflowException(Exception):
    """Base exception for all Cardflow errors."""
    pass


class ConfigurationError(CardflowException):
    """Raised when there's a configuration issue."""
    pass


class GraphError(CardflowException):
    """Raised when a graph mutation would break a structural invariant."""
    pass


class InvalidReferenceError(GraphError):
    """Raised when an edge references a node id that does not exist."""

    def __init__(self, edge_id: str, missing: str):
        self.edge_id = edge_id
        self.missing = missing
        super().__init__(f"Edge {edge_id} references unknown node '{missing}'")


class DuplicateIdError(GraphError):
    """Raised when a node or edge id is already in use."""
    pass


class NodeNotFoundError(GraphError):
    """Raised when a node id is not present in the graph."""
    pass


class GraphLockedError(GraphError):
    """Raised when a structural edit is attempted while a run is active."""
    pass


class ExecutionError(CardflowException):
    """Raised when a workflow run cannot be started."""
    pass


class ExecutionInProgressError(ExecutionError):
    """Raised when a run is requested while another is still active."""
    pass


class RunBlockedError(ExecutionError):
    """Raised when validation reports blocking errors."""

    def __init__(self, validation):
        self.validation = validation
        titles = ", ".join(issue.title for issue in validation.blocking_issues)
        super().__init__(f"Workflow cannot run: {titles}")


class ConfirmationRequired(CardflowException):
    """Raised when validation issues need explicit user acknowledgment."""

    def __init__(self, validation):
        self.validation = validation
        super().__init__(
            f"Workflow has {len(validation.issues)} issue(s); "
            f"confirm to run anyway"
        )


class StorageError(CardflowException):
    """Raised when there's an error with workflow storage."""
    pass
