#!/usr/bin/env python3
"""
Generate JSON Schemas for flugelhorn design files from the Pydantic models.

The models in flugelhorn.io.loaders are the source of truth; the schemas are
written for editors and external tools that check design files.

Usage:
    python scripts/generate_schemas.py [output_dir]
"""

import json
import sys
from pathlib import Path

from pydantic import __version__ as PYDANTIC_VERSION

from flugelhorn.io.loaders import (
    BellSpec,
    ReceiverSpec,
    SlideSpec,
    ValveSpec,
    TubeSpec,
    ManufacturingParams,
)
from flugelhorn.io.schema import SCHEMA_VERSION, get_design_schema
from flugelhorn.enums import BoreLaw, SegmentKind, PartKind

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def _write(schema: dict, path: Path) -> None:
    with open(path, "w") as f:
        json.dump(schema, f, indent=2)
    print(f"  Generated: {path}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    output_dir = Path(argv[0]) if argv else Path(__file__).parent.parent / "schemas"
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Generating JSON schemas from Pydantic models...")
    print(f"  Pydantic version: {PYDANTIC_VERSION}")

    design_schema = get_design_schema()
    design_schema["$schema"] = SCHEMA_DIALECT
    design_schema["title"] = "InstrumentDesign"
    design_schema["description"] = "Flugelhorn part design: bell, receiver, slides, valves and tubes"
    _write(design_schema, output_dir / f"flugelhorn-design-v{SCHEMA_VERSION}.json")

    # Individual part schemas for reference
    components = {
        "bell": BellSpec,
        "receiver": ReceiverSpec,
        "slide": SlideSpec,
        "valve": ValveSpec,
        "tube": TubeSpec,
        "manufacturing-params": ManufacturingParams,
    }
    for name, model in components.items():
        schema = model.model_json_schema(by_alias=False)
        schema["$schema"] = SCHEMA_DIALECT
        _write(schema, output_dir / f"{name}-v{SCHEMA_VERSION}.json")

    enums_schema = {
        "$schema": SCHEMA_DIALECT,
        "title": "FlugelhornEnums",
        "description": "Enum definitions for flugelhorn design files",
        "definitions": {
            "BoreLaw": {
                "type": "string",
                "enum": [e.value for e in BoreLaw],
                "description": "How the bore radius varies along a tube"
            },
            "SegmentKind": {
                "type": "string",
                "enum": [e.value for e in SegmentKind],
                "description": "Path segment type"
            },
            "PartKind": {
                "type": "string",
                "enum": [e.value for e in PartKind],
                "description": "Instrument part family"
            }
        }
    }
    _write(enums_schema, output_dir / f"enums-v{SCHEMA_VERSION}.json")

    print(f"\nAll schemas written to: {output_dir}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
