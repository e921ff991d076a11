"""Type-safe enums for flugelhorn part descriptions."""

from enum import Enum


class BoreLaw(Enum):
    """How the bore radius varies along a tube"""
    CONSTANT = "constant"  # Cylindrical tubing, slides, valve ports
    LINEAR = "linear"  # Straight taper (mouthpiece receiver, leadpipe)
    BELL = "bell"  # Empirical flare a + b / (1 + t/c)


class SegmentKind(Enum):
    """Path segment type for swept tubes"""
    STRAIGHT = "straight"
    ARC = "arc"


class PartKind(Enum):
    """Instrument part families"""
    BELL = "bell"
    RECEIVER = "receiver"
    SLIDE = "slide"
    VALVE = "valve"
    PISTON = "piston"
    TUBE = "tube"
