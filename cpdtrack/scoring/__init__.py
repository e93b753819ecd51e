"""
cpdtrack Scoring Package
========================

Member risk scoring and firm compliance views.

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.scoring.engine import RiskScoringEngine
from cpdtrack.scoring.firm import FirmComplianceService
from cpdtrack.scoring.rules import RiskScoringRules

__all__ = [
    "RiskScoringEngine",
    "RiskScoringRules",
    "FirmComplianceService",
]
