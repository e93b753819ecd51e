"""
cpdtrack API Routes Package
===========================

FastAPI route modules.

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.api.routes.health import router as health_router
from cpdtrack.api.routes.rule_packs import router as rule_packs_router
from cpdtrack.api.routes.benchmarking import router as benchmarking_router
from cpdtrack.api.routes.firms import router as firms_router

__all__ = [
    "health_router",
    "rule_packs_router",
    "benchmarking_router",
    "firms_router",
]
