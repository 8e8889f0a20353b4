"""Shared test fixtures for EQUIMAP test suite."""

import os

import pytest

# Ensure test environment variables are set before any settings import
os.environ.setdefault("EQUIMAP_LOG_LEVEL", "WARNING")

from equimap.graph import build_graph  # noqa: E402
from equimap.settings import EquimapSettings  # noqa: E402


@pytest.fixture
def ai_records():
    """Two tools in one discipline; only Python carries an inequality."""
    return [
        {
            "knowledgeArea": "AI",
            "discipline": "CompSci",
            "toolTechnology": "Python",
            "inequality": "Surveillance",
            "description": "General purpose programming language.",
        },
        {
            "knowledgeArea": "AI",
            "discipline": "CompSci",
            "toolTechnology": "TensorFlow",
            "inequality": "",
            "description": "Machine learning framework.",
        },
    ]


@pytest.fixture
def toolkit_records():
    """A small but realistic toolkit with shared disciplines and content."""
    return [
        {
            "knowledgeArea": "Artificial Intelligence",
            "discipline": "Computer Science",
            "toolTechnology": "Facial Recognition",
            "inequality": "Surveillance",
            "description": "Automated identification of faces in images.",
            "voiceHook": "Who is watching?",
            "relatedContent": [
                {"_id": "c1", "title": "Face value", "contentType": "video", "moderationStatus": "approved"},
                {"_id": "c2", "title": "Draft", "contentType": "document", "moderationStatus": "pending"},
            ],
        },
        {
            "knowledgeArea": "Artificial Intelligence",
            "discipline": "Computer Science",
            "toolTechnology": "Recommender Systems",
            "inequality": "Filter Bubbles",
            "description": "Ranking content for individual users.",
        },
        {
            "knowledgeArea": "Artificial Intelligence",
            "discipline": "Law",
            "toolTechnology": "Predictive Policing",
            "inequality": "Algorithmic Bias",
            "description": "Forecasting crime from historical data.",
        },
        {
            "knowledgeArea": "Connectivity",
            "discipline": "Computer Science",
            "toolTechnology": "Mesh Networks",
            "inequality": "Access",
            "description": "Community-run network infrastructure.",
        },
        {
            "knowledgeArea": "Connectivity",
            "discipline": "Economics",
            "toolTechnology": "Zero Rating",
            "inequality": "",
            "description": "Data that does not count against a cap.",
        },
    ]


@pytest.fixture
def ai_graph(ai_records):
    return build_graph(ai_records)


@pytest.fixture
def toolkit_graph(toolkit_records):
    return build_graph(toolkit_records)


@pytest.fixture
def settings():
    """Settings with defaults only (no .env file)."""
    return EquimapSettings(_env_file=None)


@pytest.fixture
def node_named():
    """Lookup helper returning the single node called ``name``."""
    def _lookup(graph, name, node_type=None):
        matches = graph.find_by_name(name, node_type)
        assert len(matches) == 1, f"expected one node named {name!r}, got {len(matches)}"
        return matches[0]
    return _lookup
