"""Manifest model, parser, change classifier and structural mutator."""

from .classifier import classify, same_component
from .models import ChangeSet, ManifestEdits, ManifestSnapshot, ParseResult, ScreenEntry
from .mutator import mutate
from .parser import parse_manifest, parse_manifest_file

__all__ = [
    "ChangeSet",
    "ManifestEdits",
    "ManifestSnapshot",
    "ParseResult",
    "ScreenEntry",
    "classify",
    "mutate",
    "parse_manifest",
    "parse_manifest_file",
    "same_component",
]
