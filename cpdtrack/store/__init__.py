"""
cpdtrack Store Package
======================

Persistence contract for the compliance core and its implementations.

This package provides:
    - ComplianceStore: the async read/write contract
    - InMemoryComplianceStore: dict-backed implementation
    - SqlAlchemyComplianceStore: PostgreSQL implementation

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.store.base import ComplianceStore, StoreFactory
from cpdtrack.store.memory import InMemoryComplianceStore

__all__ = [
    "ComplianceStore",
    "StoreFactory",
    "InMemoryComplianceStore",
]
