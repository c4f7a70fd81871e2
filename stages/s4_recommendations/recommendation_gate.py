"""Stage 4: Optional recommendations artifact"""

import logging
from typing import Optional

from core.interfaces import Stage, RecommendationGenerator
from core.models import RecommendationRequest, RecommendationResult
from core.exceptions import DelegateFailure

logger = logging.getLogger(__name__)


class RecommendationGate(Stage[RecommendationRequest, RecommendationResult]):
    """Stage 4: Delegate to the recommendation generator when requested"""
    
    @property
    def name(self) -> str:
        return "Generate Recommendations"
    
    @property
    def stage_number(self) -> int:
        return 4
    
    def __init__(self, generator: Optional[RecommendationGenerator] = None):
        self.generator = generator
    
    def validate_input(self, input_data: RecommendationRequest) -> bool:
        return isinstance(input_data, RecommendationRequest)
    
    async def execute(self, input_data: RecommendationRequest) -> RecommendationResult:
        """Execute recommendation gate"""
        if not input_data.enabled:
            return RecommendationResult()
        
        if self.generator is None:
            raise DelegateFailure(
                self.stage_number,
                "Recommendations requested but no recommendation generator is configured",
                "RecommendationGenerator",
            )
        if input_data.interview_path and not input_data.interview_path.is_file():
            raise DelegateFailure(
                self.stage_number,
                f"Interview input not found: {input_data.interview_path}",
                type(self.generator).__name__,
            )
        
        # The archive is already staged; the generator must not expand it again.
        request = input_data.model_copy(update={"skip_expand": True})
        try:
            artifact = await self.generator.generate(request)
        except Exception as e:
            raise DelegateFailure(
                self.stage_number,
                f"Recommendation generator failed: {e}",
                type(self.generator).__name__,
            ) from e
        
        logger.info("Recommendations generated%s", f": {artifact}" if artifact else "")
        return RecommendationResult(generated=True, artifact_path=artifact)
