"""
Domain layer - Business entities, models, schemas, parsing, and enums.

Submodules that touch the database (``domain.models``) are imported explicitly
by callers so that configuration can depend on ``domain.enums`` alone.
"""

from domain import enums

__all__ = ["enums"]
