from .stager import ArchiveStager, output_directory_for

__all__ = ["ArchiveStager", "output_directory_for"]
