"""World import and relational seeding engine.

Provide convenient access to :func:`worldimport.factory.create_app` so
callers can ``from worldimport import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
