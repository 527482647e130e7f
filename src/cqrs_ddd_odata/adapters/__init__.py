"""Query capability implementations.

The SQLAlchemy adapter lives in :mod:`cqrs_ddd_odata.adapters.sqlalchemy`
and needs the ``sqlalchemy`` extra.
"""

from __future__ import annotations

from .memory import InMemoryQueryCapability

__all__ = ["InMemoryQueryCapability"]
