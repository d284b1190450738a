#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Protocol definitions for the collaborators the workflow engine consumes.

Card catalogs, result providers, template catalogs and workflow stores are
supplied by the host application. These protocols define the narrow
interfaces the engine depends on, so tests can pass simple fakes.
"""

from typing import Any, List, Optional, Protocol


class ICardCatalog(Protocol):
    """Protocol for looking up card-type metadata (display only)."""

    def get_card(self, card_id: str) -> Optional["CardDescriptor"]:
        """
        Get descriptive metadata for a card type.

        Args:
            card_id: Card-type identifier (e.g. "valuation-summary")

        Returns:
            CardDescriptor, or None if the card type is unknown
        """
        ...


class IResultProvider(Protocol):
    """Protocol for the external analysis-result collaborator."""

    def resolve(self, card_id: str, symbol: str) -> Any:
        """
        Produce the analysis result of one card for one symbol.

        Args:
            card_id: Card-type identifier
            symbol: Stock symbol (e.g. "TCS")

        Returns:
            Analysis result (opaque to the engine)

        Raises:
            Exception: Any failure; the engine records its message
        """
        ...


class ITemplateCatalog(Protocol):
    """Protocol for the catalog of prebuilt workflow graphs."""

    def get_template(self, template_id: str) -> Optional["WorkflowTemplate"]:
        """Get a template by id, or None if unknown."""
        ...

    def list_templates(self) -> List["WorkflowTemplate"]:
        """List all available templates."""
        ...


class IWorkflowStore(Protocol):
    """Protocol for persisting saved workflow records."""

    def list(self) -> List["WorkflowRecord"]:
        """List all saved records, newest first."""
        ...

    def get(self, workflow_id: str) -> Optional["WorkflowRecord"]:
        """Get one record by id, or None if missing."""
        ...

    def save(self, record: "WorkflowRecord") -> "WorkflowRecord":
        """Insert or update a record; returns the stored record."""
        ...

    def delete(self, workflow_id: str) -> bool:
        """Delete a record; returns True if something was removed."""
        ...
