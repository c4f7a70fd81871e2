import json
import zipfile
from pathlib import Path
from typing import Optional

import httpx
import pytest

from core.enums import DeliverableKind
from core.interfaces import RecommendationGenerator, ReportDataExporter
from core.models import Deliverable, ToolVersion
from orchestrator import RunContext
from telemetry import TelemetrySink
from ui.progress import ProgressTracker


TENANT_DIR = "AAD-contoso.onmicrosoft.com"

DATA_FILES = [
    "applicationData.xml",
    "appRoleAssignmentData.xml",
    "directoryRoleData.xml",
    "groupData.xml",
    "oauth2PermissionGrantData.xml",
    "roleAssignmentSchedulesData.xml",
    "roleEligibilitySchedulesData.xml",
    "servicePrincipalData.xml",
    "userData.xml",
]

MANIFEST = {
    "AssessmentId": "3f1c2b9e-5a51-4c1e-9b0a-2f9c7d3e8a11",
    "AssessmentVersion": "1.2.0.0",
    "AssessmentTenantId": "72f988bf-86f1-41af-91ab-2d7cd011db47",
    "AssessmentTenantDomain": "contoso.onmicrosoft.com",
}

DELIVERABLE_URLS = {
    "ADFSAADMigrationUtils.psm1": "https://deliverables.test/tools/ADFSAADMigrationUtils.psm1",
    "AzureADAssessment.pbit": "https://deliverables.test/pbi/AzureADAssessment.pbit",
    "AzureADAssessment-ConditionalAccess.pbit": "https://deliverables.test/pbi/AzureADAssessment-ConditionalAccess.pbit",
}


def build_package(
    path: Path,
    manifest: Optional[dict] = MANIFEST,
    data_files: list = DATA_FILES,
    extra_files: Optional[dict] = None,
    tenant_dirs: tuple = (TENANT_DIR,),
) -> Path:
    """Write a ZIP package the way the collector lays it out"""
    with zipfile.ZipFile(path, "w") as archive:
        if manifest is not None:
            archive.writestr("AzureADAssessment.json", json.dumps(manifest))
        for tenant_dir in tenant_dirs:
            archive.writestr(f"{tenant_dir}/conditionalAccessPolicies.json", "[]")
            for name in data_files:
                archive.writestr(f"{tenant_dir}/{name}", f"<Objs>{name}</Objs>")
        for name, content in (extra_files or {}).items():
            archive.writestr(name, content)
    return path


class RecordingProgress(ProgressTracker):
    def __init__(self):
        self.events = []

    def start_stage(self, stage_num, stage_name, percent):
        self.events.append(("start", stage_num, percent))

    def complete_stage(self, stage_num):
        self.events.append(("done", stage_num))

    def fail(self, stage_num, message):
        self.events.append(("fail", stage_num, message))

    def complete(self):
        self.events.append(("complete",))


class RecordingTelemetry(TelemetrySink):
    def __init__(self):
        self.events = []
        self.exceptions = []
        self.requests = []

    async def track_event(self, name, properties=None):
        self.events.append((name, properties))

    async def track_exception(self, error, properties=None):
        self.exceptions.append(error)

    async def track_request(self, name, success, duration_seconds, properties=None):
        self.requests.append((name, success, properties))


class FakeExporter(ReportDataExporter):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def export(self, source_directory, output_directory):
        self.calls.append((source_directory, output_directory))
        if self.fail:
            raise RuntimeError("renderer crashed")
        (output_directory / "applications.csv").write_text("id,displayName\n")


class FakeGenerator(RecommendationGenerator):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.fail:
            raise RuntimeError("scoring failed")
        artifact = request.output_directory / "AzureADAssessmentRecommendations.json"
        artifact.write_text("[]")
        return artifact


def deliverable_transport(failing: tuple = (), calls: Optional[list] = None) -> httpx.MockTransport:
    """Serve deliverables by filename; names in `failing` raise a connect error"""
    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        if calls is not None:
            calls.append(name)
        if name in failing:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, content=f"content of {name}".encode())

    return httpx.MockTransport(handler)


@pytest.fixture
def deliverables():
    return [
        Deliverable(
            name="migration utility",
            url=DELIVERABLE_URLS["ADFSAADMigrationUtils.psm1"],
            filename="ADFSAADMigrationUtils.psm1",
            kind=DeliverableKind.MIGRATION_UTILITY,
        ),
        Deliverable(
            name="assessment template",
            url=DELIVERABLE_URLS["AzureADAssessment.pbit"],
            filename="AzureADAssessment.pbit",
            kind=DeliverableKind.DASHBOARD_TEMPLATE,
        ),
        Deliverable(
            name="conditional access template",
            url=DELIVERABLE_URLS["AzureADAssessment-ConditionalAccess.pbit"],
            filename="AzureADAssessment-ConditionalAccess.pbit",
            kind=DeliverableKind.DASHBOARD_TEMPLATE,
        ),
    ]


@pytest.fixture
def package(tmp_path: Path) -> Path:
    return build_package(tmp_path / "AzureADAssessmentData-contoso.onmicrosoft.com.aad")


@pytest.fixture
def run_context(tmp_path: Path, deliverables):
    def _make(toolset_version: str = "1.2.0.0", **overrides) -> RunContext:
        values = dict(
            output_root=tmp_path / "out",
            shared_dir=tmp_path / "out" / "PowerBI",
            deliverables=deliverables,
            toolset_version=ToolVersion.parse(toolset_version),
            http_transport=deliverable_transport(),
            exporter=FakeExporter(),
            recommendation_generator=FakeGenerator(),
            telemetry=RecordingTelemetry(),
        )
        values.update(overrides)
        return RunContext(**values)

    return _make
