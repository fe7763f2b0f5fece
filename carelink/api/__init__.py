"""
Name: HTTP API Layer

Responsibilities:
  - Expose one APIRouter per role namespace
"""

from .admin_routes import router as admin_router
from .donor_routes import router as donor_router
from .operator_routes import router as operator_router
from .volunteer_routes import router as volunteer_router

__all__ = ["admin_router", "donor_router", "operator_router", "volunteer_router"]
