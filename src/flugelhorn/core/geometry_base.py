"""
Base class for flugelhorn geometry classes.

Provides the build cache and the export/display methods shared by every
part generator.
"""

import logging

logger = logging.getLogger(__name__)


class BaseGeometry:
    """Base class providing shared export/display methods for geometry classes.

    Subclasses must:
    - Set self._part = None in __init__
    - Implement build() -> Part, storing the result in self._part
    - Set name (instance) or _part_name (class) for log messages
    """

    _part_name: str = "part"

    @property
    def part_name(self) -> str:
        return getattr(self, "name", None) or self._part_name

    def show(self):
        """Display in OCP viewer (requires ocp_vscode)."""
        part = self.build()
        try:
            from ocp_vscode import show as ocp_show
            ocp_show(part)
        except ImportError:
            logger.info("ocp_vscode not installed, nothing to show")
        return part

    def export_step(self, filepath: str):
        """Export to STEP file (builds if not already built)."""
        if self._part is None:
            self.build()

        logger.info(f"Exporting {self.part_name}: volume={self._part.volume:.2f} mm³")
        from build123d import export_step as b3d_export_step
        b3d_export_step(self._part, filepath)

        logger.info(f"Exported {self.part_name} to {filepath}")

    def export_stl(self, filepath: str, tolerance: float = 0.01, angular_tolerance: float = 0.1):
        """Export to STL for slicing (builds if not already built)."""
        if self._part is None:
            self.build()

        from build123d import export_stl as b3d_export_stl
        b3d_export_stl(
            self._part, filepath,
            tolerance=tolerance, angular_tolerance=angular_tolerance,
        )
        logger.info(f"Exported {self.part_name} to {filepath}")
