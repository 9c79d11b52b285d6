"""Exception hierarchy for navsync.

User cancellation is not an exception: it is reported through return values
(see navsync.orchestration.saga.OperationOutcome). git failures are
`(ok, output)` results, see navsync.vcs.
"""

from __future__ import annotations


class NavSyncError(Exception):
    """Base class for recoverable navsync errors. Never fatal to the watch loop."""


class ManifestSyntaxError(NavSyncError):
    """Manifest source is not valid TSX (usually a partial save)."""


class ManifestStructureError(NavSyncError):
    """Expected nested shape (navigator / screens array / declaration) not found."""
