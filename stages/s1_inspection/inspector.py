"""Stage 1: Inspection - Manifest loading and data artifact inventory"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from core.interfaces import Stage
from core.models import Advisory, AssessmentManifest, InspectionResult
from core.enums import AdvisoryKind
from core.exceptions import ManifestInvalid, TenantDirectoryMissing

logger = logging.getLogger(__name__)


class PackageInspector(Stage[Path, InspectionResult]):
    """Stage 1: Classify how far an extracted package has been processed"""
    
    @property
    def name(self) -> str:
        return "Inspect Package"
    
    @property
    def stage_number(self) -> int:
        return 1
    
    def __init__(
        self,
        expected_artifact_count: int,
        manifest_filename: str = "AzureADAssessment.json",
        tenant_dir_prefix: str = "AAD-",
        artifact_suffix: str = "Data.xml",
    ):
        self.expected_artifact_count = expected_artifact_count
        self.manifest_filename = manifest_filename
        self.tenant_dir_prefix = tenant_dir_prefix
        self.artifact_suffix = artifact_suffix
    
    def validate_input(self, input_data: Path) -> bool:
        return isinstance(input_data, Path) and input_data.is_dir()
    
    async def execute(self, input_data: Path) -> InspectionResult:
        """Execute inspection stage"""
        manifest = self.load_manifest(input_data)
        tenant_dir = self.find_tenant_directory(input_data)
        artifacts = self.list_data_artifacts(tenant_dir)
        
        count = len(artifacts)
        advisories = []
        if count not in (0, self.expected_artifact_count):
            advisory = Advisory(
                kind=AdvisoryKind.INCOMPLETE_COLLECTION,
                message=(
                    f"Found {count} of {self.expected_artifact_count} data files in "
                    f"{tenant_dir.name}. The package may be partial; continuing."
                ),
            )
            logger.warning(advisory.message)
            advisories.append(advisory)
        
        return InspectionResult(
            manifest=manifest,
            output_directory=input_data,
            tenant_data_directory=tenant_dir,
            data_artifacts=artifacts,
            expected_artifact_count=self.expected_artifact_count,
            is_fully_processed=count == self.expected_artifact_count,
            advisories=advisories,
        )
    
    def load_manifest(self, output_directory: Path) -> AssessmentManifest:
        """Read and validate the assessment manifest"""
        manifest_path = output_directory / self.manifest_filename
        if not manifest_path.is_file():
            raise ManifestInvalid(f"Manifest not found: {manifest_path}", manifest_path)
        
        try:
            payload = json.loads(manifest_path.read_text(encoding="utf-8-sig"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestInvalid(f"Manifest is not readable JSON: {e}", manifest_path) from e
        
        if not isinstance(payload, dict):
            raise ManifestInvalid("Manifest must be a JSON object", manifest_path)
        
        try:
            return AssessmentManifest.model_validate(payload)
        except ValidationError as e:
            raise ManifestInvalid(f"Manifest is missing required fields: {e}", manifest_path) from e
    
    def find_tenant_directory(self, output_directory: Path) -> Path:
        """Resolve the single tenant-prefixed data directory"""
        candidates = sorted(
            p for p in output_directory.glob(f"{self.tenant_dir_prefix}*") if p.is_dir()
        )
        if not candidates:
            raise TenantDirectoryMissing(
                f"No '{self.tenant_dir_prefix}*' directory found in {output_directory}"
            )
        if len(candidates) > 1:
            names = ", ".join(p.name for p in candidates)
            raise TenantDirectoryMissing(
                f"Multiple '{self.tenant_dir_prefix}*' directories found: {names}",
                candidates,
            )
        return candidates[0]
    
    def list_data_artifacts(self, tenant_dir: Path) -> list[Path]:
        """Raw data files directly under the tenant directory"""
        return sorted(
            p for p in tenant_dir.iterdir()
            if p.is_file() and p.name.endswith(self.artifact_suffix)
        )
