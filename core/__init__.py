"""Core abstractions for the assessment completion pipeline"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "Advisory",
    "ToolVersion",
    "StagingRequest",
    "AssessmentManifest",
    "InspectionResult",
    "VersionCheck",
    "ReportGateResult",
    "RecommendationRequest",
    "RecommendationResult",
    "Deliverable",
    "DeliverableRequest",
    "DeliverableResult",
    # Enums
    "VersionChannel",
    "AdvisoryKind",
    "DeliverableKind",
    "RunStatus",
    # Exceptions
    "AssessmentError",
    "StageError",
    "PackageUnreadable",
    "ManifestInvalid",
    "TenantDirectoryMissing",
    "DelegateFailure",
    "DeliverableFetchFailed",
    "CollaboratorLoadError",
    # Interfaces
    "Stage",
    "CredentialProvider",
    "ReportDataExporter",
    "RecommendationGenerator",
]
