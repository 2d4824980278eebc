"""Database bootstrap utilities.

Exposes engine construction and the migrations runner. Seeding lives in
`storefront.db.seed` and is imported explicitly by the app factory and tests.
"""

from storefront.db.base import get_engine
from storefront.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "apply_migrations",
]
