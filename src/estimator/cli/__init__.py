"""
CLI layer for the estimator.

Provides a Typer application with sub-commands that delegate to the
operations layer (``estimator.ops``) and the TSV adapter
(``estimator.tabular``). This package handles only terminal transport:
argument parsing, coloured output, and table formatting.

Entry point::

    estimator --help
"""

from estimator.cli.app import app

__all__ = ["app"]
