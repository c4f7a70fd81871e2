"""Abstract base classes for pipeline components and external collaborators"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Optional, TypeVar

from .models import RecommendationRequest

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class Stage(ABC, Generic[InputT, OutputT]):
    """Abstract base class for all pipeline stages"""
    
    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable stage name"""
        pass
    
    @property
    @abstractmethod
    def stage_number(self) -> int:
        """Stage number (0-5)"""
        pass
    
    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """Execute the stage"""
        pass
    
    @abstractmethod
    def validate_input(self, input_data: InputT) -> bool:
        """Validate input before processing"""
        pass


class CredentialProvider(ABC):
    """Supplies an access credential on demand; opaque to the pipeline"""
    
    @abstractmethod
    def has_valid_credential(self) -> bool:
        """Whether a usable credential is currently available"""
        pass


class ReportDataExporter(ABC):
    """Renders report outputs from the raw data artifacts of a tenant"""
    
    @abstractmethod
    async def export(self, source_directory: Path, output_directory: Path) -> None:
        """Render reports from source_directory into output_directory.

        Implementations raise on failure.
        """
        pass


class RecommendationGenerator(ABC):
    """Produces the recommendations artifact for a staged package"""
    
    @abstractmethod
    async def generate(self, request: RecommendationRequest) -> Optional[Path]:
        """Generate recommendations and return the artifact path if known"""
        pass
