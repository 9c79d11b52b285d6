"""navsync command-line layer: argparse wiring and handlers over the navsync engine.

Import side-effect free; handlers are pulled in by cli.wiring.dispatch.
"""

__all__ = []
