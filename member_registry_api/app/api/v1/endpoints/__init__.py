"""
Endpoint subpackage for API v1.

Each module defines the routers for one domain (auth, persons,
contacts, memberships).  They are aggregated in ``router.py``.
"""
