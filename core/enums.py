"""Core enumerations for the assessment completion pipeline"""

from enum import Enum


class VersionChannel(str, Enum):
    """Where a toolset build came from"""
    CANONICAL = "canonical"
    NON_CANONICAL = "non_canonical"


class AdvisoryKind(str, Enum):
    """Non-fatal conditions surfaced to the operator"""
    INCOMPLETE_COLLECTION = "incomplete_collection"
    NON_CANONICAL_PACKAGE = "non_canonical_package"
    NON_CANONICAL_TOOLSET = "non_canonical_toolset"
    VERSION_MISMATCH = "version_mismatch"


class DeliverableKind(str, Enum):
    """Auxiliary files staged next to the package output"""
    MIGRATION_UTILITY = "migration_utility"
    DASHBOARD_TEMPLATE = "dashboard_template"


class RunStatus(str, Enum):
    """Terminal state of a pipeline run"""
    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"
    FAILED = "failed"
