"""Generated per-screen files."""

from .generator import ProjectionGenerator
from .targets import TargetKind

__all__ = ["ProjectionGenerator", "TargetKind"]
