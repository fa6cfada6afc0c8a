"""Compile a framework's production build into edge function bundles.

This package exposes the CLI entry points used by ``edge-bundles`` and the
:class:`~edge_bundles.builder.Builder` that powers them: it classifies every
compiled page, derives route patterns, writes a routing manifest per bundle,
and splits the compiled files into a page-rendering and an API bundle.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from edge_bundles import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
