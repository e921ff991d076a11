"""
Pytest configuration and shared fixtures for flugelhorn-geometry tests.
"""

import json
import pytest
from pathlib import Path


# ─── Helper functions (no pytest dependency) ──────────────────────────────


def _design_small():
    """Return a small raw design dict: one of each part, quick to build."""
    return {
        "name": "test_horn",
        "receiver": {
            "length_mm": 30.0,
            "entry_diameter_mm": 11.0,
            "wall_mm": 1.2
        },
        "tubes": [
            {
                "name": "leadpipe",
                "path": [
                    {"kind": "straight", "length_mm": 40.0},
                    {"kind": "arc", "bend_radius_mm": 30.0, "angle_deg": 90.0},
                    {"kind": "straight", "length_mm": 20.0}
                ],
                "bore": {"law": "linear", "start_diameter_mm": 9.5, "end_diameter_mm": 10.5},
                "wall_mm": 1.0
            }
        ],
        "valves": [
            {
                "name": "valve1",
                "casing_bore_mm": 16.0,
                "casing_length_mm": 40.0,
                "ports": [
                    {"height_mm": 20.0, "angle_deg": 0.0, "bore_diameter_mm": 8.0},
                    {"height_mm": 20.0, "angle_deg": 180.0, "bore_diameter_mm": 8.0}
                ],
                "piston": {
                    "clearance_mm": 0.15,
                    "passages": [
                        {
                            "path": [{"kind": "straight", "length_mm": 15.7}],
                            "bore_diameter_mm": 8.0,
                            "placement": {
                                "position_mm": [-7.85, 0.0, 20.0],
                                "rotation_deg": [0.0, 90.0, 0.0]
                            }
                        }
                    ]
                }
            }
        ],
        "slides": [
            {
                "name": "main_slide",
                "leg_length_mm": 20.0,
                "bend_radius_mm": 15.0,
                "bore_diameter_mm": 10.5,
                "wall_mm": 1.0
            }
        ],
        "bell": {
            "length_mm": 120.0,
            "rim_diameter_mm": 80.0,
            "throat_diameter_mm": 12.0,
            "flare": 0.3,
            "wall_mm": 1.2,
            "slices": 120
        },
        "manufacturing": {
            "min_wall_mm": 0.8,
            "default_wall_mm": 1.2,
            "slices": 120,
            "bell_slices": 400
        }
    }


def _bell_only():
    """Return a raw design dict with only a bell."""
    return {
        "name": "bell_only",
        "bell": {
            "length_mm": 300.0,
            "rim_diameter_mm": 152.4,
            "throat_diameter_mm": 13.2,
            "flare": 0.08,
            "wall_mm": 1.2
        }
    }


# ─── Raw design dicts ─────────────────────────────────────────────────────


@pytest.fixture
def sample_design():
    """Small design with one of every part type (fresh copy per test)."""
    return _design_small()


@pytest.fixture
def bell_only_design():
    """Design containing only the bell."""
    return _bell_only()


# ─── Typed designs ────────────────────────────────────────────────────────


@pytest.fixture
def design(sample_design):
    """InstrumentDesign built from the small design dict."""
    from flugelhorn.io import InstrumentDesign
    return InstrumentDesign.model_validate(sample_design)


# ─── Files ────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_json_file(tmp_path, sample_design):
    """Create a temporary JSON file with the small design."""
    json_file = tmp_path / "test_design.json"
    with open(json_file, 'w') as f:
        json.dump(sample_design, f)
    return json_file


@pytest.fixture
def examples_dir():
    """Path to examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def example_design_file(examples_dir):
    """Full flugelhorn example design."""
    return examples_dir / "flugelhorn.json"
