"""
Build one valve casing with its piston and a crook, straight from the API.

Shows the pure Python side of flugelhorn-geometry: no JSON design file,
every part sized in code, wall thickness checked after the build.
"""

from flugelhorn.calculator.paths import PlanarPath, Straight, Arc
from flugelhorn.core import (
    ValveCasingGeometry,
    PistonGeometry,
    TuningSlideGeometry,
    Port,
    Passage,
    placement_location,
    measure_geometry_walls,
)

CASING_BORE = 16.5
CASING_LENGTH = 70.0
TUBING_BORE = 11.7

print("=" * 70)
print("VALVE BLOCK")
print("=" * 70)
print()

casing = ValveCasingGeometry(
    CASING_BORE,
    CASING_LENGTH,
    ports=[
        Port(16.0, TUBING_BORE, 0.0),
        Port(45.0, TUBING_BORE, 0.0),
        Port(45.0, TUBING_BORE, 180.0),
    ],
    wall_thickness_mm=1.2,
    name="valve1",
)
casing_part = casing.build()
print(f"Casing volume: {casing_part.volume:.2f} mm³")
print(f"  {measure_geometry_walls(casing).message}")

# Straight-through windway plus one knuckle dropping to the lower port
piston_radius = CASING_BORE / 2 - 0.15
piston = PistonGeometry(
    CASING_BORE,
    CASING_LENGTH,
    clearance_mm=0.15,
    passages=[
        Passage(
            PlanarPath([Straight(2 * piston_radius)]),
            TUBING_BORE,
            placement_location((-piston_radius, 0.0, 45.0), (0.0, 90.0, 0.0)),
        ),
        Passage(
            PlanarPath([Straight(8.0), Arc(8.0, 90.0), Straight(4.0)]),
            8.0,
            placement_location((-2.5, 0.0, 0.0)),
        ),
    ],
    name="valve1_piston",
)
piston_part = piston.build()
print(f"Piston volume: {piston_part.volume:.2f} mm³")

slide = TuningSlideGeometry(60.0, 12.0, TUBING_BORE, wall_thickness_mm=1.0, slices=120, name="valve1_slide")
slide_part = slide.build()
print(f"Slide volume: {slide_part.volume:.2f} mm³ (legs {slide.leg_spacing_mm:.1f}mm apart)")
print(f"  {measure_geometry_walls(slide).message}")
print()

casing.export_step("valve1.step")
piston.export_step("valve1_piston.step")
slide.export_stl("valve1_slide.stl")
print("✓ Wrote valve1.step, valve1_piston.step, valve1_slide.stl")
