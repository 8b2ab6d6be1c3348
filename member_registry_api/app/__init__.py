"""
Application package initializer.

The service is split into layers: ``models`` hold plain records,
``repositories`` persist them in SQLite, ``services`` enforce the
ownership and limit rules and ``api`` exposes them over HTTP.  Routers
for each domain live in ``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
