"""Output formatters for instrument designs.

Converts typed InstrumentDesign models to JSON, Markdown and a short text
summary. Uses Pydantic's model_dump(mode='json') so enums serialize as
their string values.
"""

import json
from typing import Optional, TYPE_CHECKING

from .constants import MM_PER_INCH

if TYPE_CHECKING:
    from ..io.loaders import InstrumentDesign
    from .validation import ValidationResult


def _validation_to_list(validation: "ValidationResult") -> list:
    return [
        {
            "severity": m.severity.value,
            "code": m.code,
            "message": m.message,
            "suggestion": m.suggestion,
            "part": m.part,
        }
        for m in validation.messages
    ]


def to_json(
    design: "InstrumentDesign",
    validation: Optional["ValidationResult"] = None,
    indent: int = 2,
) -> str:
    """Convert InstrumentDesign to JSON string.

    Args:
        design: Instrument design
        validation: Optional validation results to include in output
        indent: JSON indentation level (default: 2)

    Returns:
        JSON string with schema version, design and optional validation
    """
    from ..io.schema import SCHEMA_VERSION

    data = design.model_dump(mode='json', exclude_none=True)
    data['schema_version'] = SCHEMA_VERSION

    if validation is not None:
        data['validation'] = {
            'valid': validation.valid,
            'messages': _validation_to_list(validation),
        }

    return json.dumps(data, indent=indent)


def _bore_in(diameter_mm: float) -> str:
    return f'{diameter_mm:.2f}mm ({diameter_mm / MM_PER_INCH:.3f}")'


def to_markdown(
    design: "InstrumentDesign",
    validation: Optional["ValidationResult"] = None,
) -> str:
    """Human-readable design sheet."""
    lines = [f"# {design.name}", ""]
    mfg = design.manufacturing

    lines.append("## Manufacturing")
    lines.append("")
    lines.append(f"- Default wall: {mfg.default_wall_mm:.2f}mm (minimum {mfg.min_wall_mm:.2f}mm)")
    lines.append(f"- Slope-compensated wall: {'yes' if mfg.compensate_slope else 'no'}")
    lines.append(f"- Slices: {mfg.slices} (bell {mfg.bell_slices})")
    lines.append("")

    lines.append("## Parts")
    lines.append("")
    lines.append("| Part | Type | Bore | Wall |")
    lines.append("|------|------|------|------|")

    if design.receiver is not None:
        r = design.receiver
        lines.append(
            f"| {r.name} | receiver | {_bore_in(r.entry_diameter_mm)} → "
            f"{_bore_in(r.resolved_exit_diameter_mm())} | {design.wall_for(r):.2f}mm |"
        )
    for t in design.tubes:
        bore = t.bore.start_diameter_mm
        bore_str = _bore_in(bore) if bore is not None else t.bore.law.value
        lines.append(f"| {t.name} | tube | {bore_str} | {design.wall_for(t):.2f}mm |")
    for v in design.valves:
        lines.append(
            f"| {v.name} | valve casing | {_bore_in(v.casing_bore_mm)} | {design.wall_for(v):.2f}mm |"
        )
        if v.piston is not None:
            lines.append(
                f"| {v.piston_name} | piston | {len(v.piston.passages)} passages | "
                f"clearance {v.piston.clearance_mm:.2f}mm |"
            )
    for s in design.slides:
        lines.append(f"| {s.name} | slide | {_bore_in(s.bore_diameter_mm)} | {design.wall_for(s):.2f}mm |")
    if design.bell is not None:
        b = design.bell
        lines.append(
            f"| {b.name} | bell | {_bore_in(b.rim_diameter_mm)} → "
            f"{_bore_in(b.throat_diameter_mm)} | {design.wall_for(b):.2f}mm |"
        )
    lines.append("")

    if validation is not None:
        lines.append("## Validation")
        lines.append("")
        if not validation.messages:
            lines.append("No findings.")
        for m in validation.messages:
            lines.append(f"- **{m.severity.value.upper()}** `{m.code}`: {m.message}")
            if m.suggestion:
                lines.append(f"  - {m.suggestion}")
        lines.append("")

    return "\n".join(lines)


def to_summary(
    design: "InstrumentDesign",
    validation: Optional["ValidationResult"] = None,
) -> str:
    """Short plain-text summary for terminal output."""
    names = design.part_names()
    lines = [f"{design.name}: {len(names)} part(s) - {', '.join(names)}"]
    if validation is not None:
        status = "valid" if validation.valid else "INVALID"
        lines.append(
            f"Validation: {status} ({len(validation.errors)} error(s), "
            f"{len(validation.warnings)} warning(s), {len(validation.infos)} note(s))"
        )
        for m in validation.errors + validation.warnings:
            lines.append(f"  [{m.severity.value}] {m.code}: {m.message}")
    return "\n".join(lines)
