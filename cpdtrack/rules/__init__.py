"""
cpdtrack Rules Package
======================

Resolution of versioned, time-bounded rule packs.

Author: cpdtrack Team
Version: 1.0.0
"""

from cpdtrack.rules.resolver import RuleResolver, select_rule_pack

__all__ = [
    "RuleResolver",
    "select_rule_pack",
]
