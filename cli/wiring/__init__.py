"""Parser and dispatch wiring for the navsync entry point."""

from .dispatch import dispatch_command
from .parser import COMMANDS, build_parser

__all__ = ["COMMANDS", "build_parser", "dispatch_command"]
