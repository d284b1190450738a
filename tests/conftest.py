#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Shared test fixtures for Cardflow tests.

Provides reusable fixtures for:
- Temporary directories and isolated configuration
- Deterministic id factories
- Mock result providers
- Sample graphs, sessions and workflow files
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable
from unittest.mock import MagicMock

import pytest

from cardflow.core.config import CardflowConfig, reset_config
from cardflow.graph.graph import WorkflowGraph
from cardflow.graph.models import Edge, card_node, logic_node


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that's cleaned up after the test."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def workflows_path(temp_dir: Path) -> Path:
    """Path of a workflow store file inside the temporary directory."""
    return temp_dir / "workflows.json"


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_dir: Path) -> Generator[None, None, None]:
    """Point the global config at the temporary directory for every test."""
    monkeypatch.setenv("CARDFLOW_DATA_DIR", str(temp_dir))
    monkeypatch.setenv("CARDFLOW_LOG_DIR", str(temp_dir / "logs"))
    monkeypatch.setenv("CARDFLOW_STEP_DELAY", "0")
    reset_config()
    yield
    reset_config()
    # CLI runs attach handlers bound to the runner's captured stdout
    logging.getLogger("cardflow").handlers = []


@pytest.fixture
def config(temp_dir: Path) -> CardflowConfig:
    """Explicit config with test-friendly settings."""
    return CardflowConfig(data_dir=temp_dir, step_delay=0.0)


# =============================================================================
# Id Factory Fixtures
# =============================================================================

@pytest.fixture
def sequential_ids() -> Callable[[Iterable[str]], str]:
    """Id factory returning id-1, id-2, ... and skipping ids already taken."""
    counter = {"next": 0}

    def factory(taken: Iterable[str] = ()) -> str:
        used = set(taken)
        while True:
            counter["next"] += 1
            candidate = f"id-{counter['next']}"
            if candidate not in used:
                return candidate

    return factory


# =============================================================================
# Result Provider Fixtures
# =============================================================================

@pytest.fixture
def mock_provider():
    """Result provider returning a small dict for every (card, symbol)."""
    provider = MagicMock()
    provider.resolve.side_effect = lambda card_id, symbol: {"card": card_id, "symbol": symbol}
    return provider


@pytest.fixture
def failing_provider():
    """Factory for a provider that raises for the given card ids."""
    def make(*failing_cards: str, message: str = "Data unavailable"):
        provider = MagicMock()

        def resolve(card_id, symbol):
            if card_id in failing_cards:
                raise RuntimeError(message)
            return {"card": card_id, "symbol": symbol}

        provider.resolve.side_effect = resolve
        return provider

    return make


# =============================================================================
# Graph Fixtures
# =============================================================================

@pytest.fixture
def chain_graph() -> WorkflowGraph:
    """a -> b -> c, all card nodes."""
    return WorkflowGraph(
        nodes=[
            card_node("a", "valuation-summary"),
            card_node("b", "quality-score"),
            card_node("c", "growth-summary"),
        ],
        edges=[
            Edge(id="e1", source="a", target="b"),
            Edge(id="e2", source="b", target="c"),
        ],
    )


@pytest.fixture
def branching_graph() -> WorkflowGraph:
    """Card -> condition with true/false branches -> merge -> card."""
    return WorkflowGraph(
        nodes=[
            card_node("score", "quality-score"),
            logic_node("cond", "condition", condition="score > 70"),
            card_node("buy", "valuation-summary"),
            card_node("avoid", "warning-sentinel"),
            logic_node("join", "merge"),
            card_node("verdict", "investment-memo"),
        ],
        edges=[
            Edge(id="e1", source="score", target="cond"),
            Edge(id="e2", source="cond", target="buy", source_handle="true"),
            Edge(id="e3", source="cond", target="avoid", source_handle="false"),
            Edge(id="e4", source="buy", target="join"),
            Edge(id="e5", source="avoid", target="join"),
            Edge(id="e6", source="join", target="verdict"),
        ],
    )


# =============================================================================
# Workflow File Fixtures
# =============================================================================

@pytest.fixture
def write_workflow(temp_dir: Path):
    """Factory writing a workflow record dict to a JSON file."""
    def write(record: dict, name: str = "workflow.json") -> Path:
        path = temp_dir / name
        path.write_text(json.dumps(record), encoding="utf-8")
        return path

    return write


@pytest.fixture
def simple_record() -> dict:
    """Two connected cards analyzed for TCS."""
    return {
        "id": "wf-1",
        "name": "Value check",
        "nodes": [
            {"id": "n1", "position": {"x": 0, "y": 0},
             "data": {"type": "card", "card_id": "valuation-summary", "label": "Valuation"}},
            {"id": "n2", "position": {"x": 0, "y": 0},
             "data": {"type": "card", "card_id": "quality-score", "label": "Quality"}},
        ],
        "edges": [{"id": "e1", "source": "n1", "target": "n2"}],
        "symbols": ["TCS"],
    }


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use the filesystem)"
    )
