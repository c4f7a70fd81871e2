"""Custom exceptions for the assessment completion pipeline"""

from pathlib import Path
from typing import Optional


class AssessmentError(Exception):
    """Base exception for all assessment completion errors"""
    pass


class StageError(AssessmentError):
    """Error in a specific stage"""
    def __init__(self, stage: int, message: str):
        super().__init__(f"Stage {stage}: {message}")
        self.stage = stage
        self.message = message


class PackageUnreadable(StageError):
    """Package archive is missing or is not a valid container"""
    def __init__(self, message: str, package_path: Optional[Path] = None):
        super().__init__(0, message)
        self.package_path = package_path


class ManifestInvalid(StageError):
    """Assessment manifest is missing or unparseable"""
    def __init__(self, message: str, manifest_path: Optional[Path] = None):
        super().__init__(1, message)
        self.manifest_path = manifest_path


class TenantDirectoryMissing(StageError):
    """Zero or several tenant data directories were found"""
    def __init__(self, message: str, candidates: list[Path] = None):
        super().__init__(1, message)
        self.candidates = candidates or []


class DelegateFailure(StageError):
    """An external collaborator (exporter, generator) reported failure"""
    def __init__(self, stage: int, message: str, delegate: str = None):
        super().__init__(stage, message)
        self.delegate = delegate


class DeliverableFetchFailed(AssessmentError):
    """A remote deliverable could not be downloaded"""
    def __init__(self, name: str, url: str, reason: str):
        super().__init__(f"Failed to fetch {name} from {url}: {reason}")
        self.name = name
        self.url = url
        self.reason = reason


class CollaboratorLoadError(AssessmentError):
    """A configured collaborator import path could not be resolved"""
    def __init__(self, message: str, import_path: str = None):
        super().__init__(message)
        self.import_path = import_path
