"""navsync: keep a TSX screen manifest in sync with its generated screen files.

Layout:

- navsync/manifest      : parse, classify and edit the navigation manifest
- navsync/projections   : per-screen generated files (feature, Expo tab, Next page)
- navsync/orchestration : state machine, sub-batch runner, engine
- navsync/prompts, vcs, watcher: external collaborators
"""

__version__ = "0.3.0"
