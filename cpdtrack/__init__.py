"""
cpdtrack Core Package
=====================

Compliance analytics core for the CPD (continuing professional
development) tracker.

This package contains:
    - rules/: Rule pack resolution for a credential on a date
    - benchmarking/: Peer cohort statistics and percentile standing
    - scoring/: Per-member compliance risk scoring for firms
    - store/: Read/write contract for the persistence layer
    - db/: SQLAlchemy models and session management
    - api/: FastAPI REST surface over the core

Author: cpdtrack Team
Version: 1.0.0
"""

__version__ = "1.0.0"
