"""Stage 2: Version reconciliation between package producer and toolset"""

import logging
from importlib import metadata
from typing import List, Optional, Union

from core.interfaces import Stage
from core.models import Advisory, ToolVersion, VersionCheck
from core.enums import AdvisoryKind, VersionChannel

logger = logging.getLogger(__name__)

PACKAGE_NAME = "aad-assessment-complete"


def detect_toolset_version(configured: Optional[str] = None, distribution: str = PACKAGE_NAME) -> ToolVersion:
    """Version of the running toolset.

    An explicit configured value wins. Without one, the installed distribution
    metadata is used; a toolset running from a plain checkout has none and is
    reported as non-canonical.
    """
    if configured:
        return ToolVersion.parse(configured)
    try:
        return ToolVersion.parse(metadata.version(distribution))
    except metadata.PackageNotFoundError:
        return ToolVersion(text="0.0.-1.-1", channel=VersionChannel.NON_CANONICAL)


def _as_version(value: Union[str, ToolVersion]) -> ToolVersion:
    if isinstance(value, ToolVersion):
        return value
    return ToolVersion.parse(value)


def reconcile(
    package_version: Union[str, ToolVersion],
    toolset_version: Union[str, ToolVersion],
    distribution: str = PACKAGE_NAME,
) -> List[Advisory]:
    """Advisories for producer/consumer version skew. Never raises."""
    package = _as_version(package_version)
    toolset = _as_version(toolset_version)

    if not package.is_canonical:
        return [Advisory(
            kind=AdvisoryKind.NON_CANONICAL_PACKAGE,
            message=(
                f"This package was produced by a build of {distribution} that was not "
                "installed from the package index. Install the published release "
                f"(pip install {distribution}) before producing packages."
            ),
        )]

    if not toolset.is_canonical:
        return [Advisory(
            kind=AdvisoryKind.NON_CANONICAL_TOOLSET,
            message=(
                f"The running {distribution} was not installed from the package index. "
                f"Install the published release (pip install {distribution}) before "
                "completing the assessment."
            ),
        )]

    if package.text != toolset.text:
        return [Advisory(
            kind=AdvisoryKind.VERSION_MISMATCH,
            message=(
                f"The package was produced with version {package.text} but is being "
                f"completed with version {toolset.text}. Use matching versions for "
                "consistent reports:\n"
                f"    pip uninstall --yes {distribution}\n"
                f"    pip install {distribution}=={package.text}"
            ),
        )]

    return []


class VersionReconciler(Stage[VersionCheck, List[Advisory]]):
    """Stage 2: Advisory comparison of package and toolset versions"""
    
    @property
    def name(self) -> str:
        return "Check Versions"
    
    @property
    def stage_number(self) -> int:
        return 2
    
    def __init__(self, distribution: str = PACKAGE_NAME):
        self.distribution = distribution
    
    def validate_input(self, input_data: VersionCheck) -> bool:
        return isinstance(input_data, VersionCheck)
    
    async def execute(self, input_data: VersionCheck) -> List[Advisory]:
        """Execute version reconciliation"""
        advisories = reconcile(
            input_data.package_version,
            input_data.toolset_version,
            distribution=self.distribution,
        )
        for advisory in advisories:
            logger.warning(advisory.message)
        return advisories
