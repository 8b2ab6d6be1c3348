"""
Top-level package for the Member Registry API.

All functionality lives in submodules under ``app``; this marker lets
tests and the operator scripts import ``member_registry_api.app.*`` by
its fully qualified name.
"""

__all__ = []
