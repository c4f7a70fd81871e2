import json
from pathlib import Path

import pytest

from core.enums import AdvisoryKind
from core.exceptions import ManifestInvalid, PackageUnreadable, TenantDirectoryMissing
from core.models import StagingRequest
from stages.s0_staging import ArchiveStager, output_directory_for
from stages.s1_inspection import PackageInspector

from conftest import DATA_FILES, MANIFEST, TENANT_DIR, build_package


def _inspector() -> PackageInspector:
    return PackageInspector(expected_artifact_count=9)


def test_output_directory_named_after_package(tmp_path: Path):
    package = tmp_path / "AzureADAssessmentData-contoso.onmicrosoft.com.aad"
    assert output_directory_for(package, tmp_path / "out") == (
        tmp_path / "out" / "AzureADAssessmentData-contoso.onmicrosoft.com"
    )


@pytest.mark.asyncio
async def test_staging_extracts_package(tmp_path: Path, package: Path):
    output_directory = await ArchiveStager().execute(
        StagingRequest(package_path=package, output_root=tmp_path / "out")
    )

    assert (output_directory / "AzureADAssessment.json").is_file()
    assert len(list((output_directory / TENANT_DIR).glob("*Data.xml"))) == 9


@pytest.mark.asyncio
async def test_staging_twice_replaces_previous_extraction(tmp_path: Path, package: Path):
    stager = ArchiveStager()
    request = StagingRequest(package_path=package, output_root=tmp_path / "out")

    first = await stager.execute(request)
    (first / "stale.txt").write_text("left over")
    (first / TENANT_DIR / "userData.xml").unlink()
    (first / TENANT_DIR / "report.csv").write_text("rendered")

    second = await stager.execute(request)

    assert second == first
    assert not (second / "stale.txt").exists()
    assert not (second / TENANT_DIR / "report.csv").exists()
    assert sorted(p.name for p in (second / TENANT_DIR).glob("*Data.xml")) == sorted(DATA_FILES)


@pytest.mark.asyncio
async def test_staging_missing_package(tmp_path: Path):
    with pytest.raises(PackageUnreadable):
        await ArchiveStager().execute(
            StagingRequest(package_path=tmp_path / "missing.aad", output_root=tmp_path / "out")
        )


@pytest.mark.asyncio
async def test_staging_corrupt_package_leaves_output_untouched(tmp_path: Path):
    package = tmp_path / "broken.aad"
    package.write_bytes(b"this is not a zip archive")
    previous = tmp_path / "out" / "broken"
    previous.mkdir(parents=True)
    (previous / "keep.txt").write_text("x")

    with pytest.raises(PackageUnreadable):
        await ArchiveStager().execute(StagingRequest(package_path=package, output_root=tmp_path / "out"))

    assert (previous / "keep.txt").exists()


def _rewrite_compression_method(package: Path, method: int) -> None:
    """Set the compression method of every member in both ZIP headers"""
    data = bytearray(package.read_bytes())
    for signature, offset in ((b"PK\x03\x04", 8), (b"PK\x01\x02", 10)):
        start = data.find(signature)
        while start != -1:
            data[start + offset:start + offset + 2] = method.to_bytes(2, "little")
            start = data.find(signature, start + 4)
    package.write_bytes(bytes(data))


@pytest.mark.asyncio
async def test_staging_unsupported_compression_leaves_output_untouched(tmp_path: Path):
    package = build_package(tmp_path / "pkg.aad")
    _rewrite_compression_method(package, 99)
    previous = tmp_path / "out" / "pkg"
    previous.mkdir(parents=True)
    (previous / "keep.txt").write_text("x")

    with pytest.raises(PackageUnreadable):
        await ArchiveStager().execute(StagingRequest(package_path=package, output_root=tmp_path / "out"))

    assert (previous / "keep.txt").exists()


@pytest.mark.asyncio
async def test_staging_checksum_mismatch(tmp_path: Path):
    package = build_package(tmp_path / "pkg.aad")
    package.write_bytes(
        package.read_bytes().replace(b"<Objs>applicationData", b"<Objz>applicationData", 1)
    )

    with pytest.raises(PackageUnreadable) as exc_info:
        await ArchiveStager().execute(StagingRequest(package_path=package, output_root=tmp_path / "out"))

    assert "applicationData.xml" in str(exc_info.value)
    assert not (tmp_path / "out" / "pkg").exists()


async def _staged(tmp_path: Path, **package_kwargs) -> Path:
    package = build_package(tmp_path / "pkg.aad", **package_kwargs)
    return await ArchiveStager().execute(StagingRequest(package_path=package, output_root=tmp_path / "out"))


@pytest.mark.asyncio
async def test_inspect_fully_collected_package(tmp_path: Path):
    output_directory = await _staged(tmp_path)

    result = await _inspector().execute(output_directory)

    assert result.is_fully_processed is True
    assert len(result.data_artifacts) == 9
    assert result.tenant_data_directory == output_directory / TENANT_DIR
    assert result.manifest.assessment_version == "1.2.0.0"
    assert result.manifest.tenant_domain == "contoso.onmicrosoft.com"
    assert result.advisories == []


@pytest.mark.asyncio
async def test_inspect_processed_package_has_no_advisory(tmp_path: Path):
    output_directory = await _staged(tmp_path, data_files=[])

    result = await _inspector().execute(output_directory)

    assert result.is_fully_processed is False
    assert result.data_artifacts == []
    assert result.advisories == []


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [1, 8, 10])
async def test_inspect_partial_package_warns(tmp_path: Path, count: int, caplog):
    files = (DATA_FILES + ["extraData.xml"])[:count]
    output_directory = await _staged(tmp_path, data_files=files)

    result = await _inspector().execute(output_directory)

    assert result.is_fully_processed is False
    assert [a.kind for a in result.advisories] == [AdvisoryKind.INCOMPLETE_COLLECTION]
    assert f"Found {count} of 9" in caplog.text


@pytest.mark.asyncio
async def test_inspect_respects_configured_expected_count(tmp_path: Path):
    output_directory = await _staged(tmp_path, data_files=DATA_FILES[:7])

    result = await PackageInspector(expected_artifact_count=7).execute(output_directory)

    assert result.is_fully_processed is True


@pytest.mark.asyncio
async def test_inspect_missing_manifest(tmp_path: Path):
    output_directory = await _staged(tmp_path, manifest=None)

    with pytest.raises(ManifestInvalid):
        await _inspector().execute(output_directory)


@pytest.mark.asyncio
async def test_inspect_unparseable_manifest(tmp_path: Path):
    output_directory = await _staged(tmp_path, manifest=None)
    (output_directory / "AzureADAssessment.json").write_text("{not json")

    with pytest.raises(ManifestInvalid):
        await _inspector().execute(output_directory)


@pytest.mark.asyncio
async def test_inspect_manifest_missing_fields(tmp_path: Path):
    output_directory = await _staged(tmp_path, manifest={"AssessmentId": "abc"})

    with pytest.raises(ManifestInvalid):
        await _inspector().execute(output_directory)


@pytest.mark.asyncio
async def test_inspect_manifest_with_byte_order_mark(tmp_path: Path):
    output_directory = await _staged(tmp_path, manifest=None)
    (output_directory / "AzureADAssessment.json").write_text(json.dumps(MANIFEST), encoding="utf-8-sig")

    result = await _inspector().execute(output_directory)

    assert result.manifest.assessment_id == MANIFEST["AssessmentId"]


@pytest.mark.asyncio
async def test_inspect_without_tenant_directory(tmp_path: Path):
    output_directory = await _staged(tmp_path, tenant_dirs=())

    with pytest.raises(TenantDirectoryMissing):
        await _inspector().execute(output_directory)


@pytest.mark.asyncio
async def test_inspect_with_ambiguous_tenant_directories(tmp_path: Path):
    output_directory = await _staged(tmp_path, tenant_dirs=(TENANT_DIR, "AAD-fabrikam.com"))

    with pytest.raises(TenantDirectoryMissing) as exc_info:
        await _inspector().execute(output_directory)

    assert len(exc_info.value.candidates) == 2
