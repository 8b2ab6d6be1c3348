"""
Pydantic schema definitions for API payloads.

Each domain (users, persons, contacts, memberships) defines its own
models for request and response bodies.  Schemas are separated from
the domain dataclasses in ``models`` so that the API representation
can evolve independently of storage.
"""
