"""
cpdtrack Shared Schemas Package
===============================

Record and result contracts used across the compliance core.

This package provides:
    - Credential records: credentials, rule packs, holdings, members
    - Benchmark records: snapshots, user benchmarks, batch reports
    - Risk records: per-credential status, member profiles, rosters, alerts

Author: cpdtrack Team
Version: 1.0.0
"""

from shared.schemas.credentials import (
    Credential,
    FirmMember,
    ResolvedRules,
    RulePack,
    RuleSet,
    RuleSource,
    UserCredential,
)

from shared.schemas.benchmarks import (
    ALL_JURISDICTIONS,
    BenchmarkSnapshot,
    SnapshotBatchReport,
    SnapshotFailure,
    UserBenchmark,
)

from shared.schemas.risk import (
    AlertSeverity,
    AlertType,
    ComplianceStatus,
    CredentialBreakdown,
    CredentialRiskStatus,
    FirmAlert,
    FirmComplianceSummary,
    FirmRiskRoster,
    MemberRiskProfile,
    RiskFactors,
    RiskLevel,
)

__all__ = [
    # Credentials
    "Credential",
    "FirmMember",
    "ResolvedRules",
    "RulePack",
    "RuleSet",
    "RuleSource",
    "UserCredential",
    # Benchmarks
    "ALL_JURISDICTIONS",
    "BenchmarkSnapshot",
    "SnapshotBatchReport",
    "SnapshotFailure",
    "UserBenchmark",
    # Risk
    "AlertSeverity",
    "AlertType",
    "ComplianceStatus",
    "CredentialBreakdown",
    "CredentialRiskStatus",
    "FirmAlert",
    "FirmComplianceSummary",
    "FirmRiskRoster",
    "MemberRiskProfile",
    "RiskFactors",
    "RiskLevel",
]
