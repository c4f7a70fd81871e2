"""Stage 3: Report generation from raw data artifacts"""

import logging
from typing import Optional

from core.interfaces import Stage, ReportDataExporter
from core.models import InspectionResult, ReportGateResult
from core.exceptions import DelegateFailure

logger = logging.getLogger(__name__)


class ReportGate(Stage[InspectionResult, ReportGateResult]):
    """Stage 3: Export reports once, then prune the raw data files.

    Pruning is what makes a second pass over the same extraction see zero
    artifacts and skip the export.
    """
    
    @property
    def name(self) -> str:
        return "Complete Reports"
    
    @property
    def stage_number(self) -> int:
        return 3
    
    def __init__(self, exporter: Optional[ReportDataExporter] = None):
        self.exporter = exporter
    
    def validate_input(self, input_data: InspectionResult) -> bool:
        return isinstance(input_data, InspectionResult)
    
    async def execute(self, input_data: InspectionResult) -> ReportGateResult:
        """Execute report gate"""
        if not input_data.is_fully_processed:
            reason = (
                f"{len(input_data.data_artifacts)} raw data files present; "
                "reports already generated or collection incomplete"
            )
            logger.info("Skipping report generation: %s", reason)
            return ReportGateResult(skipped_reason=reason)
        
        tenant_dir = input_data.tenant_data_directory
        try:
            await self._export(tenant_dir)
        except DelegateFailure as e:
            # Exporter owns its retries; raw data stays for the next pass.
            logger.error("Report generation failed, raw data kept: %s", e.message)
            return ReportGateResult(error=e.message)
        
        pruned, failures = [], []
        for artifact in input_data.data_artifacts:
            try:
                artifact.unlink()
                pruned.append(artifact)
            except OSError as e:
                logger.warning("Could not remove raw data file %s: %s", artifact, e)
                failures.append(artifact)
        
        logger.info("Reports generated in %s; removed %d raw data files", tenant_dir, len(pruned))
        return ReportGateResult(generated=True, pruned=pruned, prune_failures=failures)
    
    async def _export(self, tenant_dir) -> None:
        if self.exporter is None:
            raise DelegateFailure(self.stage_number, "No report data exporter configured", "ReportDataExporter")
        try:
            await self.exporter.export(tenant_dir, tenant_dir)
        except Exception as e:
            raise DelegateFailure(
                self.stage_number,
                f"Report data exporter failed: {e}",
                type(self.exporter).__name__,
            ) from e
