"""
JSON schema helpers for flugelhorn design files.

The Pydantic models in loaders.py are the source of truth; this module
exposes their JSON schema and a light structural check that reports
problems as messages instead of raising.
"""

from typing import Any, Dict, List

SCHEMA_VERSION = "1.0"

PART_SECTIONS = ("bell", "receiver", "slides", "valves", "tubes")
LIST_SECTIONS = ("slides", "valves", "tubes")


def get_design_schema() -> Dict[str, Any]:
    """JSON schema for InstrumentDesign, generated from the Pydantic model."""
    from .loaders import InstrumentDesign

    schema = InstrumentDesign.model_json_schema(by_alias=False)
    schema["$comment"] = f"flugelhorn design schema v{SCHEMA_VERSION}"
    return schema


def validate_json_schema(data: Dict[str, Any]) -> List[str]:
    """
    Structural check of a raw design dict.

    Args:
        data: Parsed JSON (optionally wrapped in a 'design' key)

    Returns:
        List of error strings (empty if the structure looks valid)
    """
    errors: List[str] = []

    if not isinstance(data, dict):
        return ["Design must be a JSON object"]

    if "design" in data:
        data = data["design"]

    version = data.get("schema_version")
    if version is not None and str(version).split(".")[0] != SCHEMA_VERSION.split(".")[0]:
        errors.append(f"Unsupported schema_version {version} (expected {SCHEMA_VERSION})")

    if not any(data.get(section) for section in PART_SECTIONS):
        errors.append(f"No part sections found (expected one of {', '.join(PART_SECTIONS)})")

    for section in LIST_SECTIONS:
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, list):
            errors.append(f"'{section}' must be a list")
            continue
        for i, item in enumerate(value):
            if not isinstance(item, dict):
                errors.append(f"{section}[{i}] must be an object")
            elif "name" not in item:
                errors.append(f"{section}[{i}] is missing 'name'")

    for section in ("bell", "receiver", "manufacturing"):
        value = data.get(section)
        if value is not None and not isinstance(value, dict):
            errors.append(f"'{section}' must be an object")

    return errors
