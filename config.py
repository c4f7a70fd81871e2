"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from pathlib import Path

from core.enums import DeliverableKind
from core.models import Deliverable


class Settings(BaseSettings):
    """Application configuration"""

    # Output
    OUTPUT_ROOT: str = "~/AzureADAssessment"
    SHARED_WORKING_DIR: Optional[str] = None  # Defaults to <OUTPUT_ROOT>/PowerBI

    # Package layout
    MANIFEST_FILENAME: str = "AzureADAssessment.json"
    TENANT_DIR_PREFIX: str = "AAD-"
    DATA_ARTIFACT_SUFFIX: str = "Data.xml"
    EXPECTED_ARTIFACT_COUNT: int = 9  # Data categories exported by the collector

    # Toolset version (read from installed distribution metadata if unset)
    TOOLSET_VERSION: Optional[str] = None
    DISTRIBUTION_NAME: str = "aad-assessment-complete"

    # Deliverables
    MIGRATION_UTILITY_URL: str = (
        "https://raw.githubusercontent.com/AzureAD/Deployment-Plans/master/"
        "ADFS%20to%20AzureAD%20App%20Migration/ADFSAADMigrationUtils.psm1"
    )
    ASSESSMENT_TEMPLATE_URL: str = (
        "https://github.com/AzureAD/AzureADAssessment/raw/master/assets/AzureADAssessment.pbit"
    )
    CONDITIONAL_ACCESS_TEMPLATE_URL: str = (
        "https://github.com/AzureAD/AzureADAssessment/raw/master/assets/"
        "AzureADAssessment-ConditionalAccess.pbit"
    )
    HTTP_TIMEOUT: float = 60.0  # seconds

    # Collaborators ("package.module:attribute")
    REPORT_EXPORTER: Optional[str] = None
    RECOMMENDATION_GENERATOR: Optional[str] = None
    CREDENTIAL_PROVIDER: Optional[str] = None

    # Telemetry
    TELEMETRY_ENABLED: bool = True
    APPLICATIONINSIGHTS_CONNECTION_STRING: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_output_root(self) -> Path:
        """Get output root directory path"""
        return Path(self.OUTPUT_ROOT).expanduser()

    def get_shared_dir(self) -> Path:
        """Get the shared dashboard working directory"""
        if self.SHARED_WORKING_DIR:
            return Path(self.SHARED_WORKING_DIR).expanduser()
        return self.get_output_root() / "PowerBI"

    def get_deliverables(self) -> List[Deliverable]:
        """Get the fixed deliverable set"""
        return [
            Deliverable(
                name="ADFS to Azure AD migration utility",
                url=self.MIGRATION_UTILITY_URL,
                filename="ADFSAADMigrationUtils.psm1",
                kind=DeliverableKind.MIGRATION_UTILITY,
            ),
            Deliverable(
                name="Assessment dashboard template",
                url=self.ASSESSMENT_TEMPLATE_URL,
                filename="AzureADAssessment.pbit",
                kind=DeliverableKind.DASHBOARD_TEMPLATE,
            ),
            Deliverable(
                name="Conditional Access dashboard template",
                url=self.CONDITIONAL_ACCESS_TEMPLATE_URL,
                filename="AzureADAssessment-ConditionalAccess.pbit",
                kind=DeliverableKind.DASHBOARD_TEMPLATE,
            ),
        ]


settings = Settings()
