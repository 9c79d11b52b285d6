"""CLI handlers facade.

Re-exports the concrete handlers so `cli.handlers.handle_*` stays the one
import path used by dispatch.
"""
from __future__ import annotations
from .core_handlers_common import _err as report_error
from .core_handlers_direct import handle_add, handle_delete
from .core_handlers_watch import handle_watch
__all__ = ['handle_add', 'handle_delete', 'handle_watch', 'report_error']
