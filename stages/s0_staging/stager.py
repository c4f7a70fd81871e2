"""Stage 0: Staging - Fresh extraction of the package archive"""

import logging
import shutil
import zipfile
import zlib
from pathlib import Path

from core.interfaces import Stage
from core.models import StagingRequest
from core.exceptions import PackageUnreadable

logger = logging.getLogger(__name__)

UNREADABLE_ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    NotImplementedError,  # unsupported compression method
    zlib.error,
    EOFError,
)


def output_directory_for(package_path: Path, output_root: Path) -> Path:
    """Deterministic extraction target for a package"""
    return Path(output_root) / Path(package_path).stem


class ArchiveStager(Stage[StagingRequest, Path]):
    """Stage 0: Replace any previous extraction with the archive contents"""
    
    @property
    def name(self) -> str:
        return "Expand Data Package"
    
    @property
    def stage_number(self) -> int:
        return 0
    
    def validate_input(self, input_data: StagingRequest) -> bool:
        return isinstance(input_data, StagingRequest)
    
    async def execute(self, input_data: StagingRequest) -> Path:
        """Execute staging stage"""
        package_path = Path(input_data.package_path)
        
        if not package_path.is_file():
            raise PackageUnreadable(f"Package not found: {package_path}", package_path)
        if not zipfile.is_zipfile(package_path):
            raise PackageUnreadable(f"Package is not a valid archive: {package_path}", package_path)
        
        output_directory = output_directory_for(package_path, input_data.output_root)
        
        try:
            with zipfile.ZipFile(package_path) as archive:
                # Every member must decompress before the previous extraction is touched.
                bad_member = archive.testzip()
                if bad_member is not None:
                    raise PackageUnreadable(
                        f"Package archive is corrupt: checksum mismatch in {bad_member}", package_path
                    )
                
                # Extraction replaces, never merges. Removal errors propagate.
                if output_directory.exists():
                    logger.info("Removing previous extraction at %s", output_directory)
                    shutil.rmtree(output_directory)
                output_directory.mkdir(parents=True)
                
                archive.extractall(output_directory)
                member_count = len(archive.infolist())
        except UNREADABLE_ARCHIVE_ERRORS as e:
            raise PackageUnreadable(f"Package archive is corrupt: {e}", package_path) from e
        
        logger.info("Expanded %d entries from %s into %s", member_count, package_path.name, output_directory)
        return output_directory
