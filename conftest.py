"""Root conftest — shared fixtures for all editor tests."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

# Ensure the project root is on sys.path
_root_dir = str(Path(__file__).resolve().parent)
if _root_dir not in sys.path:
    sys.path.insert(0, _root_dir)

# Keep tests away from the real ~/.config/flowcanvas
if not os.environ.get("FLOWCANVAS_DIR"):
    os.environ["FLOWCANVAS_DIR"] = tempfile.mkdtemp(prefix="flowcanvas-test-")

import pytest

from schemas.graph import EditorGraph
from services import graph as graph_ops


@pytest.fixture(autouse=True)
def _reset_sessions():
    """Start every test with an empty session store."""
    from services.sessions import editor_sessions

    editor_sessions.clear()
    yield
    editor_sessions.clear()


@pytest.fixture
def graph():
    return EditorGraph()


@pytest.fixture
def switch_component(graph):
    """A graph holding one freshly dropped switch, plus that switch."""
    return graph_ops.create_component(graph, "switch", 100, 120)


@pytest.fixture
def wired_graph(graph):
    """request -> switch -> response, with the switch's if branch wired to response."""
    graph, request = graph_ops.create_component(graph, "request", 0, 0)
    graph, switch = graph_ops.create_component(graph, "switch", 200, 0)
    graph, response = graph_ops.create_component(graph, "response", 400, 0)
    if_id = graph_ops.get_switch_chain(graph, switch.id).conditions[0].id
    graph, _ = graph_ops.create_connection(graph, request.id, switch.id)
    graph, _ = graph_ops.create_connection(graph, switch.id, response.id, from_condition_id=if_id)
    return graph, {"request": request.id, "switch": switch.id, "response": response.id, "if": if_id}


@pytest.fixture
def app():
    from main import app as _app
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def editor_id(client):
    resp = client.post("/api/v1/editors/")
    assert resp.status_code == 201
    return resp.json()["editorId"]
