"""Shared fixtures for caption pipeline tests."""

import json

import pytest
from loguru import logger
from mapcaptions.config import Settings


@pytest.fixture
def cfg(tmp_path):
    return Settings(work_dir=tmp_path)


@pytest.fixture
def map_doc():
    return {
        "title": "City map",
        "groups": [
            {
                "name": "Base",
                "layers": [
                    {"id": "ortho", "infobox": {"enabled": False}, "caption": "stale", "opacity": 1},
                ],
                "groups": [
                    {"id": 12, "layers": [{"id": "transport", "visible": True}]},
                ],
            },
            {"name": "Overlays", "layers": [{"id": "parcels"}]},
        ],
    }


@pytest.fixture
def layers_doc():
    return {
        "wmslayers": [
            {"id": "ortho", "caption": "Orthophoto"},
            {
                "id": "transport",
                "caption": "Transport",
                "layers": ["roads", "rails"],
                "layersInfo": [
                    {"id": "roads", "caption": "Roads"},
                    {"id": "rails", "caption": "Railways"},
                ],
            },
        ],
        "wfslayers": [{"id": "parcels", "caption": "Parcels"}],
    }


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def _drop_log_sinks():
    """Remove sinks bound to a captured stderr once the test ends."""
    yield
    logger.remove()
