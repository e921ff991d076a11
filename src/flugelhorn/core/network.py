"""
Branching tube networks.

Where tubes meet (valve ports entering a casing, a branch teeing into a
run) each tube's wall would block the other's bore if the tubes were
hollowed one at a time. A network therefore fuses every outside solid first
and cuts every bore afterwards.
"""

import logging
from typing import Iterable, List, Optional

from build123d import Part

from .geometry_base import BaseGeometry
from .geometry_repair import fuse_all, cut_all, repair_geometry, largest_solid, simplify_geometry
from .tube import SweptTubeGeometry

logger = logging.getLogger(__name__)


class TubeNetwork(BaseGeometry):
    """
    Union of swept tubes with all bores opened through each other.

    Args:
        members: Located swept tubes forming the network
        extra_outer: Additional solids fused with the tube walls
            (beads, ferrules, bosses)
        extra_inner: Additional solids cut after the bores
        name: Part name for logs and file names
        simplify: Merge ruled loft strips before the bore cuts
    """

    _part_name = "network"

    def __init__(
        self,
        members: Iterable[SweptTubeGeometry],
        extra_outer: Iterable[Part] = (),
        extra_inner: Iterable[Part] = (),
        name: str = "network",
        simplify: bool = True,
    ):
        self.members: List[SweptTubeGeometry] = list(members)
        self.extra_outer = list(extra_outer)
        self.extra_inner = list(extra_inner)
        self.name = name
        self.simplify = simplify

        if not self.members and not self.extra_outer:
            raise ValueError("Tube network needs at least one member")

        self._part = None

    def add(self, member: SweptTubeGeometry) -> "TubeNetwork":
        """Add a tube before building."""
        if self._part is not None:
            raise RuntimeError(f"{self.name} is already built")
        self.members.append(member)
        return self

    def build(self) -> Part:
        """
        Build the network: fuse all walls, then cut all bores.

        Returns:
            build123d Part
        """
        if self._part is not None:
            return self._part

        logger.info(f"Building {self.name}: {len(self.members)} tube(s)")

        outers = [m.outer_solid() for m in self.members] + self.extra_outer
        inners = [m.inner_solid() for m in self.members] + self.extra_inner

        logger.debug(f"Fusing {len(outers)} outer solids...")
        body = fuse_all(outers)
        if self.simplify:
            body = simplify_geometry(body, f"{self.name} walls")

        logger.debug(f"Cutting {len(inners)} bores...")
        body = cut_all(body, inners)
        body = repair_geometry(body)

        solid_count = len(body.solids()) if hasattr(body, "solids") else 1
        if solid_count > 1:
            logger.warning(
                f"{self.name} is not connected ({solid_count} solids) - check member placements"
            )
        body = largest_solid(body)

        logger.debug(f"Final {self.name} volume: {body.volume:.2f} mm³")
        self._part = body
        return body

    def member(self, name: str) -> Optional[SweptTubeGeometry]:
        for m in self.members:
            if m.name == name:
                return m
        return None
