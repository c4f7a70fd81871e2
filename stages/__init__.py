"""Pipeline stages"""

from .s0_staging import ArchiveStager
from .s1_inspection import PackageInspector
from .s2_versioning import VersionReconciler
from .s3_reports import ReportGate
from .s4_recommendations import RecommendationGate
from .s5_deliverables import DeliverableStager

__all__ = [
    "ArchiveStager",
    "PackageInspector",
    "VersionReconciler",
    "ReportGate",
    "RecommendationGate",
    "DeliverableStager",
]
