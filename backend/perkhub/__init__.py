"""
PerkHub — Package Initializer
===============================

Two layers share this package:

    ┌─────────────────────────────────────┐
    │  client/  Search-and-Filter view    │  ← asyncio view-model + httpx client
    ├ ─ ─ ─ ─ ─ ─  HTTP  ─ ─ ─ ─ ─ ─ ─ ─ ─┤
    │  routes/  API layer                 │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  services/  Business logic          │  ← filtering, validation, ownership
    ├─────────────────────────────────────┤
    │  models/ + schemas/  Data           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  database.py  Persistence           │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

The view only talks to the backend over HTTP; it shares the Pydantic schemas
and the exception hierarchy, nothing else.
"""

__version__ = "1.0.0"
