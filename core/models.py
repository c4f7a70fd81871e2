"""Core data models for the assessment completion pipeline"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AdvisoryKind, DeliverableKind, VersionChannel
from .exceptions import DeliverableFetchFailed


# ─────────────────────────────────────────────────────────────
# Shared
# ─────────────────────────────────────────────────────────────

class Advisory(BaseModel):
    """Operator warning that never alters control flow"""
    kind: AdvisoryKind
    message: str


class ToolVersion(BaseModel):
    """Version of the toolset that produced or consumes a package.

    The build (third dotted) component marks the channel: ``-1`` or a missing
    build means the toolset was not installed from the canonical distribution
    channel. That sentinel is folded into ``channel`` at parse time and is not
    carried any further.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    channel: VersionChannel = VersionChannel.CANONICAL

    @classmethod
    def parse(cls, text: str) -> "ToolVersion":
        value = (text or "").strip()
        parts = value.split(".")
        channel = VersionChannel.CANONICAL
        if len(parts) < 3 or parts[2] == "-1":
            channel = VersionChannel.NON_CANONICAL
        return cls(text=value, channel=channel)

    @property
    def is_canonical(self) -> bool:
        return self.channel == VersionChannel.CANONICAL

    def __str__(self) -> str:
        return self.text


# ─────────────────────────────────────────────────────────────
# Stage 0: Staging
# ─────────────────────────────────────────────────────────────

class StagingRequest(BaseModel):
    """Input of Stage 0"""
    package_path: Path
    output_root: Path


# ─────────────────────────────────────────────────────────────
# Stage 1: Inspection
# ─────────────────────────────────────────────────────────────

class AssessmentManifest(BaseModel):
    """Metadata written by the collector into every package"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    assessment_id: str = Field(alias="AssessmentId")
    assessment_version: str = Field(alias="AssessmentVersion")
    tenant_id: str = Field(alias="AssessmentTenantId")
    tenant_domain: str = Field(alias="AssessmentTenantDomain")

    def telemetry_properties(self) -> dict[str, str]:
        return {
            "AssessmentId": self.assessment_id,
            "AssessmentVersion": self.assessment_version,
            "AssessmentTenantId": self.tenant_id,
            "AssessmentTenantDomain": self.tenant_domain,
        }


class InspectionResult(BaseModel):
    """Output of Stage 1"""
    manifest: AssessmentManifest
    output_directory: Path
    tenant_data_directory: Path
    data_artifacts: list[Path] = []
    expected_artifact_count: int
    is_fully_processed: bool = False
    advisories: list[Advisory] = []


# ─────────────────────────────────────────────────────────────
# Stage 2: Version reconciliation
# ─────────────────────────────────────────────────────────────

class VersionCheck(BaseModel):
    """Input of Stage 2"""
    package_version: ToolVersion
    toolset_version: ToolVersion


# ─────────────────────────────────────────────────────────────
# Stage 3: Reports
# ─────────────────────────────────────────────────────────────

class ReportGateResult(BaseModel):
    """Output of Stage 3"""
    generated: bool = False
    pruned: list[Path] = []
    prune_failures: list[Path] = []
    skipped_reason: Optional[str] = None
    error: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Stage 4: Recommendations
# ─────────────────────────────────────────────────────────────

class RecommendationRequest(BaseModel):
    """Input of Stage 4 and payload handed to the generator"""
    enabled: bool = False
    package_path: Path
    output_root: Path
    output_directory: Path
    interview_path: Optional[Path] = None
    credential_present: bool = False
    skip_expand: bool = True


class RecommendationResult(BaseModel):
    """Output of Stage 4"""
    generated: bool = False
    artifact_path: Optional[Path] = None


# ─────────────────────────────────────────────────────────────
# Stage 5: Deliverables
# ─────────────────────────────────────────────────────────────

class Deliverable(BaseModel):
    """Auxiliary file fetched from a fixed remote location"""
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    filename: str
    kind: DeliverableKind


class DeliverableRequest(BaseModel):
    """Input of Stage 5"""
    output_directory: Path
    tenant_data_directory: Path
    stage_to_shared_dir: bool = True
    shared_dir: Optional[Path] = None


class DeliverableResult(BaseModel):
    """Output of Stage 5"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    fetched: list[Path] = []
    failures: list[DeliverableFetchFailed] = []
    shared_files: list[Path] = []

    @property
    def degraded(self) -> bool:
        return bool(self.failures)
