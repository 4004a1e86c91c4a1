"""
CLI layer for dbspine.

Provides a Typer application whose commands map one-to-one onto
:class:`~dbspine.core.adapters.DatabaseAdapter` operations.  All database
logic lives in ``dbspine.core`` -- this package handles only terminal
transport: argument parsing, coloured output, and table formatting.

Entry point::

    dbspine --help
"""

from dbspine.cli.app import app

__all__ = ["app"]
