"""Infrastructure layer package."""

from .report_exporter import encode_delimited_text, encode_workbook, save_artifact
from .result_cache import ProcessedDataCache
from .upload_repository import UploadValidationError, discover_uploads, load_uploads, select_uploads

__all__ = [
    "encode_delimited_text",
    "encode_workbook",
    "save_artifact",
    "ProcessedDataCache",
    "UploadValidationError",
    "discover_uploads",
    "load_uploads",
    "select_uploads",
]
