"""API routes package"""

from . import health, meals, patients

__all__ = ["health", "meals", "patients"]
