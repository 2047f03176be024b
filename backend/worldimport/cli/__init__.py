"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .importer import world_cli


def init_app(app: Flask) -> None:
    """Register the ``world`` command group.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``world import`` command.
    """
    app.cli.add_command(world_cli)
