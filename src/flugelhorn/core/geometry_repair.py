"""
Boolean helpers and topology repair for lofted tube solids.

Ruled lofts with hundreds of sections produce many thin faces, and the
fuse/cut chains of a tube network can leave split shells behind. These
helpers run the OCP boolean operations directly and clean the result up.
"""

import logging
import time
from typing import Iterable, Optional

from OCP.BRepAlgoAPI import BRepAlgoAPI_Fuse, BRepAlgoAPI_Cut
from OCP.ShapeFix import ShapeFix_Shape, ShapeFix_Solid
from OCP.ShapeUpgrade import ShapeUpgrade_UnifySameDomain
from OCP.BRepBuilderAPI import BRepBuilderAPI_Sewing, BRepBuilderAPI_MakeSolid
from OCP.TopExp import TopExp_Explorer
from OCP.TopAbs import TopAbs_SHELL, TopAbs_FACE
from OCP.TopoDS import TopoDS

from build123d import Part, export_step, import_step

logger = logging.getLogger(__name__)

# Solids smaller than this are boolean slivers
SLIVER_VOLUME_MM3 = 0.01


def _wrapped(shape):
    return shape.wrapped if hasattr(shape, "wrapped") else shape


def fuse_all(parts: Iterable) -> Optional[Part]:
    """
    Union a sequence of solids with OCP fuse.

    build123d's ``+`` operator can fail on lofted solids with many faces, so
    the fuse is done pairwise on the OCC shapes. A failed step is logged and
    skipped rather than aborting the whole union.

    Returns:
        Fused Part, or None for an empty sequence
    """
    parts = list(parts)
    if not parts:
        return None

    shape = _wrapped(parts[0])
    for i, part in enumerate(parts[1:], start=1):
        fuse = BRepAlgoAPI_Fuse(shape, _wrapped(part))
        fuse.Build()
        if fuse.IsDone():
            shape = fuse.Shape()
        else:
            logger.warning(f"Fuse of solid {i} failed, skipping it")
    return Part(shape)


def cut_all(base, tools: Iterable) -> Part:
    """Subtract each tool solid from base in turn."""
    shape = _wrapped(base)
    for i, tool in enumerate(tools):
        cut = BRepAlgoAPI_Cut(shape, _wrapped(tool))
        cut.Build()
        if cut.IsDone():
            shape = cut.Shape()
        else:
            logger.warning(f"Cut of tool {i} failed, skipping it")
    return Part(shape)


def largest_solid(part):
    """
    Collapse a boolean result to one solid.

    Repair may return a Compound wrapping one valid solid (volume 0 on the
    Compound but correct on the inner Solid), and booleans may leave
    slivers next to the real solid.
    """
    if not hasattr(part, "solids"):
        return part

    solids = [s for s in part.solids() if s.volume > SLIVER_VOLUME_MM3]
    if len(solids) == 1:
        return solids[0]
    if len(solids) > 1:
        logger.warning(f"Result has {len(solids)} disconnected solids, keeping the largest")
        return max(solids, key=lambda s: s.volume)
    return part


def _accept(candidate, strategy: str):
    """Repair result collapsed to one solid, or None if it is unusable."""
    if not candidate.is_valid:
        return None
    solid = largest_solid(candidate)
    if solid.volume <= SLIVER_VOLUME_MM3:
        return None
    logger.debug(f"Geometry repair successful ({strategy})")
    return solid


def repair_geometry(part: Part) -> Part:
    """
    Multi-strategy repair for invalid topology after tube booleans.

    Tries four strategies in order, returning as soon as one produces a
    valid solid with real volume:

    1. UnifySameDomain: merge the ruled loft strips sharing a surface.
    2. Sew + MakeSolid: stitch all faces into a shell then build a solid,
       followed by ShapeFix_Solid cleanup.
    3. ShapeFix_Shape: general-purpose shape repair on the unified result.
    4. STEP roundtrip: export then re-import to let the STEP writer/reader
       normalise the topology.

    A candidate that is valid but holds only slivers is rejected, and
    an accepted candidate is collapsed to its largest solid. If all
    strategies fail the original *part* is returned unchanged.

    Args:
        part: Part to repair.

    Returns:
        Repaired solid (or original if repair fails or is unnecessary).
    """
    if part.is_valid:
        return part

    try:
        shape = _wrapped(part)

        # Strategy 1: unify strips on the same surface
        unifier = ShapeUpgrade_UnifySameDomain(shape, True, True, True)
        unifier.Build()
        unified = unifier.Shape()

        result = _accept(Part(unified), "unify")
        if result is not None:
            return result

        # Strategy 2: sew the bore and outer faces into one shell
        sewer = BRepBuilderAPI_Sewing(1e-6)

        explorer = TopExp_Explorer(unified, TopAbs_FACE)
        face_count = 0
        while explorer.More():
            sewer.Add(explorer.Current())
            face_count += 1
            explorer.Next()

        if face_count > 0:
            sewer.Perform()
            sewn = sewer.SewedShape()

            shell_explorer = TopExp_Explorer(sewn, TopAbs_SHELL)
            if shell_explorer.More():
                shell = TopoDS.Shell_s(shell_explorer.Current())
                solid_maker = BRepBuilderAPI_MakeSolid(shell)
                if solid_maker.IsDone():
                    solid = solid_maker.Solid()

                    solid_fixer = ShapeFix_Solid(solid)
                    solid_fixer.Perform()
                    fixed_solid = solid_fixer.Solid()

                    result = _accept(Part(fixed_solid), "sew + solid")
                    if result is not None:
                        return result

        # Strategy 3: general ShapeFix on the unified shape
        fixer = ShapeFix_Shape(unified)
        fixer.Perform()
        fixed = fixer.Shape()

        result = _accept(Part(fixed), "ShapeFix")
        if result is not None:
            return result

        # Strategy 4: STEP export/reimport roundtrip
        import tempfile
        from pathlib import Path

        with tempfile.NamedTemporaryFile(suffix=".step", delete=False) as f:
            step_path = Path(f.name)

        try:
            export_step(part, str(step_path))
            result = _accept(import_step(str(step_path)), "STEP roundtrip")
            if result is not None:
                return result
        finally:
            step_path.unlink(missing_ok=True)

        logger.debug("Geometry repair did not achieve valid solid, using original")
        return part

    except Exception as e:
        logger.debug(f"Geometry repair skipped: {e}")
        return part


def simplify_geometry(part: Part, description: str = "") -> Part:
    """
    Merge the ruled strips of a lofted solid before heavy booleans.

    A ruled loft of N sections has N-1 faces per wall. UnifySameDomain
    merges strips lying on the same surface (all of them on straight
    constant-bore runs), then ShapeFix cleans up what is left. Fewer faces
    make later fuse/cut chains faster and more reliable.

    Args:
        part: The part to simplify.
        description: Optional label for log messages.

    Returns:
        Simplified Part (or original if simplification fails).
    """
    if description:
        logger.debug(f"Simplifying {description}...")

    simplify_start = time.time()

    try:
        if not isinstance(part, Part):
            if hasattr(part, "wrapped"):
                part = Part(part.wrapped)
            else:
                raise ValueError(f"Cannot simplify object of type {type(part)}")

        unifier = ShapeUpgrade_UnifySameDomain(part.wrapped, True, True, True)
        unifier.Build()
        unified_shape = unifier.Shape()

        fixer = ShapeFix_Shape(unified_shape)
        fixer.Perform()
        fixed_shape = fixer.Shape()

        simplified = Part(fixed_shape)

        simplify_time = time.time() - simplify_start
        if description:
            logger.debug(f"done in {simplify_time:.1f}s")

        return simplified
    except Exception as e:
        simplify_time = time.time() - simplify_start
        logger.warning(f"failed after {simplify_time:.1f}s: {e}, using original")
        return part
