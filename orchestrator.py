"""Pipeline orchestrator"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import httpx

from core.models import *
from core.enums import RunStatus
from core.exceptions import StageError
from core.interfaces import CredentialProvider, ReportDataExporter, RecommendationGenerator
from stages import (
    ArchiveStager, PackageInspector, VersionReconciler,
    ReportGate, RecommendationGate, DeliverableStager
)
from stages.s2_versioning import detect_toolset_version
from telemetry import TelemetrySink, LoggingTelemetry, NullTelemetry, AppInsightsTelemetry, configure_app_insights
from ui.progress import ProgressTracker
from utils.loader import load_collaborator

logger = logging.getLogger(__name__)

STAGE_PERCENT = {0: 0, 1: 10, 2: 30, 3: 40, 4: 60, 5: 80}

COMPLETION_EVENT = "AAD Assessment Report Generation Complete"
REQUEST_NAME = "Complete Assessment Reports"


@dataclass
class RunContext:
    """Explicit configuration for one pipeline run"""
    output_root: Path
    shared_dir: Path
    deliverables: List[Deliverable]
    toolset_version: ToolVersion
    expected_artifact_count: int = 9
    manifest_filename: str = "AzureADAssessment.json"
    tenant_dir_prefix: str = "AAD-"
    artifact_suffix: str = "Data.xml"
    distribution_name: str = "aad-assessment-complete"
    http_timeout: float = 60.0
    http_transport: Optional[httpx.AsyncBaseTransport] = None
    exporter: Optional[ReportDataExporter] = None
    recommendation_generator: Optional[RecommendationGenerator] = None
    credential_provider: Optional[CredentialProvider] = None
    telemetry: TelemetrySink = field(default_factory=NullTelemetry)

    @classmethod
    def from_settings(cls, settings, output_root: Optional[Path] = None, shared_dir: Optional[Path] = None) -> "RunContext":
        """Build a context from application settings, resolving collaborators"""
        connection_string = settings.APPLICATIONINSIGHTS_CONNECTION_STRING
        if (
            settings.TELEMETRY_ENABLED
            and connection_string
            and configure_app_insights(connection_string, settings.DISTRIBUTION_NAME)
        ):
            telemetry = AppInsightsTelemetry()
        elif settings.TELEMETRY_ENABLED:
            telemetry = LoggingTelemetry()
        else:
            telemetry = NullTelemetry()

        return cls(
            output_root=Path(output_root) if output_root else settings.get_output_root(),
            shared_dir=Path(shared_dir) if shared_dir else settings.get_shared_dir(),
            deliverables=settings.get_deliverables(),
            toolset_version=detect_toolset_version(settings.TOOLSET_VERSION, settings.DISTRIBUTION_NAME),
            expected_artifact_count=settings.EXPECTED_ARTIFACT_COUNT,
            manifest_filename=settings.MANIFEST_FILENAME,
            tenant_dir_prefix=settings.TENANT_DIR_PREFIX,
            artifact_suffix=settings.DATA_ARTIFACT_SUFFIX,
            distribution_name=settings.DISTRIBUTION_NAME,
            http_timeout=settings.HTTP_TIMEOUT,
            exporter=load_collaborator(settings.REPORT_EXPORTER, ReportDataExporter),
            recommendation_generator=load_collaborator(
                settings.RECOMMENDATION_GENERATOR, RecommendationGenerator
            ),
            credential_provider=load_collaborator(settings.CREDENTIAL_PROVIDER, CredentialProvider),
            telemetry=telemetry,
        )

    def credential_present(self) -> bool:
        if self.credential_provider is None:
            return False
        return self.credential_provider.has_valid_credential()


@dataclass
class PipelineContext:
    """State accumulated through one pipeline run"""
    package_path: Path
    output_directory: Optional[Path] = None
    inspection: Optional[InspectionResult] = None
    advisories: List[Advisory] = field(default_factory=list)
    reports: Optional[ReportGateResult] = None
    recommendations: Optional[RecommendationResult] = None
    deliverables: Optional[DeliverableResult] = None
    status: Optional[RunStatus] = None

    @property
    def manifest(self) -> Optional[AssessmentManifest]:
        return self.inspection.manifest if self.inspection else None

    @property
    def degraded(self) -> bool:
        return bool(self.deliverables and self.deliverables.degraded)


class Orchestrator:
    """Pipeline coordinator"""

    def __init__(self, context: RunContext, progress: ProgressTracker):
        self.context = context
        self.progress = progress
        self._current_stage = 0

        # Initialize stages
        self.stages = {
            0: ArchiveStager(),
            1: PackageInspector(
                expected_artifact_count=context.expected_artifact_count,
                manifest_filename=context.manifest_filename,
                tenant_dir_prefix=context.tenant_dir_prefix,
                artifact_suffix=context.artifact_suffix,
            ),
            2: VersionReconciler(context.distribution_name),
            3: ReportGate(context.exporter),
            4: RecommendationGate(context.recommendation_generator),
            5: DeliverableStager(
                context.deliverables,
                timeout=context.http_timeout,
                transport=context.http_transport,
            ),
        }

    async def run(
        self,
        package_path: Path,
        stage_to_shared_dir: bool = True,
        generate_recommendations: bool = False,
        interview_path: Optional[Path] = None,
    ) -> PipelineContext:
        """Execute full pipeline"""
        ctx = PipelineContext(package_path=Path(package_path))
        started = time.monotonic()

        try:
            # Stage 0: Fresh extraction
            ctx.output_directory = await self._execute_stage(0, StagingRequest(
                package_path=ctx.package_path,
                output_root=self.context.output_root,
            ))

            # Stage 1: Inspection
            ctx.inspection = await self._execute_stage(1, ctx.output_directory)
            ctx.advisories.extend(ctx.inspection.advisories)

            # Stage 2: Version check (advisory only)
            ctx.advisories.extend(await self._execute_stage(2, VersionCheck(
                package_version=ToolVersion.parse(ctx.manifest.assessment_version),
                toolset_version=self.context.toolset_version,
            )))

            # Stage 3: Reports
            ctx.reports = await self._execute_stage(3, ctx.inspection)

            # Stage 4: Recommendations
            ctx.recommendations = await self._execute_stage(4, RecommendationRequest(
                enabled=generate_recommendations,
                package_path=ctx.package_path,
                output_root=self.context.output_root,
                output_directory=ctx.output_directory,
                interview_path=interview_path,
                credential_present=self.context.credential_present(),
            ))

            # Stage 5: Deliverables
            ctx.deliverables = await self._execute_stage(5, DeliverableRequest(
                output_directory=ctx.output_directory,
                tenant_data_directory=ctx.inspection.tenant_data_directory,
                stage_to_shared_dir=stage_to_shared_dir,
                shared_dir=self.context.shared_dir,
            ))

        except Exception as e:
            ctx.status = RunStatus.FAILED
            stage = e.stage if isinstance(e, StageError) else self._current_stage
            fail_result = self.progress.fail(stage, str(e))
            if hasattr(fail_result, '__await__'):
                await fail_result

            properties = self._telemetry_properties(ctx)
            await self.context.telemetry.track_exception(e, properties)
            await self.context.telemetry.track_request(
                REQUEST_NAME, False, time.monotonic() - started, properties
            )
            raise

        if ctx.degraded:
            ctx.status = RunStatus.DEGRADED
            logger.warning(
                "Completed with %d deliverable(s) missing:\n%s",
                len(ctx.deliverables.failures),
                "\n".join(f"  - {failure}" for failure in ctx.deliverables.failures),
            )
        else:
            ctx.status = RunStatus.SUCCEEDED

        properties = self._telemetry_properties(ctx)
        await self.context.telemetry.track_event(COMPLETION_EVENT, ctx.manifest.telemetry_properties())
        await self.context.telemetry.track_request(
            REQUEST_NAME, True, time.monotonic() - started, properties
        )

        complete_result = self.progress.complete()
        if hasattr(complete_result, '__await__'):
            await complete_result

        return ctx

    async def _execute_stage(self, stage_num: int, input_data) -> any:
        """Execute a single stage with progress tracking"""
        stage = self.stages[stage_num]
        self._current_stage = stage_num

        # Handle both sync and async progress trackers
        start_result = self.progress.start_stage(stage_num, stage.name, STAGE_PERCENT[stage_num])
        if hasattr(start_result, '__await__'):
            await start_result

        if not stage.validate_input(input_data):
            raise StageError(stage_num, "Invalid input")

        result = await stage.execute(input_data)

        complete_result = self.progress.complete_stage(stage_num)
        if hasattr(complete_result, '__await__'):
            await complete_result

        return result

    def _telemetry_properties(self, ctx: PipelineContext) -> dict:
        properties = {
            "Status": ctx.status.value if ctx.status else "",
            "ToolsetVersion": self.context.toolset_version.text,
        }
        if ctx.manifest:
            properties.update(ctx.manifest.telemetry_properties())
        return properties
