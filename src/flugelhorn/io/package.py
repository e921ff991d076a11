"""
Export and packaging of instrument parts.

Produces one output package per generation run: a STEP file per part,
optional STL and 3MF meshes, an assembly 3MF with every part at its
placement, design.json and design.md.

The CLI writes files to a directory, optionally zipped.
"""

import io
import logging
import re
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from build123d import Mesher, Part, Unit, export_step, export_stl

from .loaders import InstrumentDesign

logger = logging.getLogger(__name__)

# Mesh settings for printable tubes: fine enough that a 0.8mm wall keeps its shape
LINEAR_DEFLECTION = 0.001
ANGULAR_DEFLECTION = 0.05


def _repair_for_export(part: Part, name: str) -> Part:
    """Apply geometry repair before STEP export.

    Uses ShapeUpgrade_UnifySameDomain + ShapeFix_Shape to merge the ruled
    loft strips back into single faces and fix remaining issues.
    """
    try:
        from OCP.ShapeFix import ShapeFix_Shape
        from OCP.ShapeUpgrade import ShapeUpgrade_UnifySameDomain

        unifier = ShapeUpgrade_UnifySameDomain(part.wrapped, True, True, True)
        unifier.Build()
        unified = unifier.Shape()

        fixer = ShapeFix_Shape(unified)
        fixer.Perform()
        fixed = fixer.Shape()

        return Part(fixed)
    except Exception as e:
        logger.warning(f"Geometry repair failed for {name}: {e}")
        return part


def export_part_step(part: Part, name: str = "part") -> bytes:
    """Export Part to STEP bytes with geometry repair.

    Args:
        part: build123d Part to export.
        name: Label for log messages.

    Returns:
        STEP file contents as bytes.
    """
    repaired = _repair_for_export(part, name)

    with tempfile.NamedTemporaryFile(suffix=".step", delete=False) as tmp:
        tmp_path = Path(tmp.name)

    try:
        export_step(repaired, str(tmp_path))
        return tmp_path.read_bytes()
    finally:
        tmp_path.unlink(missing_ok=True)


def _export_3mf(parts: List[Part], label: str) -> Optional[bytes]:
    with tempfile.NamedTemporaryFile(suffix=".3mf", delete=False) as tmp:
        tmp_path = Path(tmp.name)

    try:
        mesher = Mesher(unit=Unit.MM)
        for part in parts:
            mesher.add_shape(
                part,
                linear_deflection=LINEAR_DEFLECTION,
                angular_deflection=ANGULAR_DEFLECTION,
            )
        mesher.write(str(tmp_path))
        return tmp_path.read_bytes()
    except Exception as e:
        logger.warning(f"{label} 3MF export failed (non-fatal): {e}")
        return None
    finally:
        tmp_path.unlink(missing_ok=True)


def export_part_3mf(part: Part) -> Optional[bytes]:
    """Export Part to 3MF bytes.

    Returns None if meshing fails (non-fatal).
    """
    return _export_3mf([part], "Part")


def export_assembly_3mf(parts: Mapping[str, Part]) -> Optional[bytes]:
    """Export every part, as placed, into one 3MF. Returns None on failure."""
    return _export_3mf(list(parts.values()), "Assembly")


def export_part_stl(part: Part) -> bytes:
    """Export Part to STL bytes."""
    with tempfile.NamedTemporaryFile(suffix=".stl", delete=False) as tmp:
        tmp_path = Path(tmp.name)

    try:
        export_stl(
            part,
            str(tmp_path),
            tolerance=LINEAR_DEFLECTION,
            angular_tolerance=ANGULAR_DEFLECTION,
        )
        return tmp_path.read_bytes()
    finally:
        tmp_path.unlink(missing_ok=True)


@dataclass
class PackageFiles:
    """Container for all output files from geometry generation, keyed by part name."""

    step: Dict[str, bytes] = field(default_factory=dict)
    stl: Dict[str, bytes] = field(default_factory=dict)
    mesh_3mf: Dict[str, bytes] = field(default_factory=dict)
    assembly_3mf: Optional[bytes] = None
    design_json: Optional[str] = None
    design_md: Optional[str] = None

    def file_map(self) -> Dict[str, bytes]:
        """Binary files by output file name."""
        files = {}
        for ext, data in (("step", self.step), ("stl", self.stl), ("3mf", self.mesh_3mf)):
            for name, content in data.items():
                files[f"{part_filename(name)}.{ext}"] = content
        if self.assembly_3mf is not None:
            files["assembly.3mf"] = self.assembly_3mf
        return files


def part_filename(name: str) -> str:
    """File-safe version of a part name."""
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "part"


def generate_package(
    design: InstrumentDesign,
    parts: Mapping[str, Part],
    include_stl: bool = False,
    include_3mf: bool = False,
    include_assembly: bool = True,
    validation=None,
    log: Optional[Callable[[str], None]] = None,
) -> PackageFiles:
    """Generate all output files for built instrument parts.

    Args:
        design: InstrumentDesign the parts were built from.
        parts: Built parts keyed by part name.
        include_stl: Generate STL files.
        include_3mf: Generate 3MF files.
        include_assembly: With 3MF, also write every part into assembly.3mf
            (only when more than one part was built).
        validation: Optional ValidationResult for design.json/md output.
        log: Optional logging callback (e.g. print).

    Returns:
        PackageFiles with all generated file data.
    """
    files = PackageFiles()

    def _log(msg: str):
        if log:
            log(msg)

    for name, part in parts.items():
        _log(f"Exporting {name} STEP...")
        files.step[name] = export_part_step(part, name)
        _log(f"  STEP: {len(files.step[name]) / 1024:.1f} KB")

        if include_3mf:
            _log(f"Exporting {name} 3MF...")
            data = export_part_3mf(part)
            if data:
                files.mesh_3mf[name] = data
                _log(f"  3MF: {len(data) / 1024:.1f} KB")

        if include_stl:
            _log(f"Exporting {name} STL...")
            files.stl[name] = export_part_stl(part)
            _log(f"  STL: {len(files.stl[name]) / 1024:.1f} KB")

    if include_assembly and include_3mf and len(parts) > 1:
        _log("Exporting assembly 3MF...")
        files.assembly_3mf = export_assembly_3mf(parts)
        if files.assembly_3mf:
            _log(f"  Assembly 3MF: {len(files.assembly_3mf) / 1024:.1f} KB")

    # Lazy import to avoid circular dependency (io -> calculator -> io)
    from ..calculator.output import to_json, to_markdown

    _log("Generating design.json and design.md...")
    files.design_json = to_json(design, validation=validation)
    files.design_md = to_markdown(design, validation=validation)

    return files


def package_basename(design: InstrumentDesign) -> str:
    """Base name for a zipped package: the design name, file-safe."""
    return part_filename(design.name)


def save_package_to_dir(files: PackageFiles, output_dir: Path) -> List[Path]:
    """Write all PackageFiles to a directory.

    Args:
        files: PackageFiles from generate_package().
        output_dir: Directory to write files into (created if needed).

    Returns:
        List of Paths written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    for name, data in files.file_map().items():
        path = output_dir / name
        path.write_bytes(data)
        written.append(path)

    if files.design_json is not None:
        path = output_dir / "design.json"
        path.write_text(files.design_json, encoding="utf-8")
        written.append(path)

    if files.design_md is not None:
        path = output_dir / "design.md"
        path.write_text(files.design_md, encoding="utf-8")
        written.append(path)

    return written


def create_package_zip(files: PackageFiles) -> bytes:
    """Create ZIP archive from PackageFiles.

    Returns:
        ZIP file contents as bytes.
    """
    buf = io.BytesIO()

    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.file_map().items():
            zf.writestr(name, data)

        if files.design_json is not None:
            zf.writestr("design.json", files.design_json)

        if files.design_md is not None:
            zf.writestr("design.md", files.design_md)

    return buf.getvalue()
