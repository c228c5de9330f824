"""
Upload Router

Receives a CSV upload and synchronizes its rows into Kontent.
"""
import logging
import os
import tempfile
from typing import Optional

from fastapi import APIRouter, Depends, UploadFile, File, Form, status

from kontent_sync.core.exceptions import ValidationException, ErrorCode
from kontent_sync.core.settings import Environment, get_kontent_settings
from kontent_sync.schemas.sync_schema import SyncResultResponseSchema
from kontent_sync.services.csv_import.csv_import_service import CSVImportService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["CSV Upload"]
)


def get_csv_import_service() -> CSVImportService:
    return CSVImportService(get_kontent_settings())


@router.post(
    "/upload",
    status_code=status.HTTP_200_OK,
    response_model=SyncResultResponseSchema,
    response_description="CSV synchronized to Kontent"
)
async def upload_csv(
    file: Optional[UploadFile] = File(None, description="CSV file to import"),
    environment: Environment = Form(..., description="Target environment: dev or prod"),
    content_type: Optional[str] = Form(None, description="Codename of the content type of the created items"),
    import_service: CSVImportService = Depends(get_csv_import_service)
):
    """
    Import a localized CSV into Kontent.

    **CSV Format**:
    - First row: headers, one column per locale (default, zh-HK, zh-TW, ko-KR, ja-JP, es-MX)
    - Columns are read in that order
    - Encoding: UTF-8

    **Per row**:
    - Items that already exist (same codename) are counted as processed and left untouched
    - New items are created with one published variant per locale
      (moved to the review step first when environment=prod)
    - A failing row is reported in unprocessedRecords, the other rows are still imported
    """
    if file is None or not file.filename:
        raise ValidationException("No file uploaded", ErrorCode.REQUIRED_FIELD_MISSING, {"field": "file"})

    if not file.filename.lower().endswith('.csv'):
        raise ValidationException(
            "The file must be a CSV",
            ErrorCode.VALIDATION_ERROR,
            {"filename": file.filename}
        )

    content_type = content_type or import_service.settings.content_type_codename
    if not content_type:
        raise ValidationException(
            "No content type selected",
            ErrorCode.REQUIRED_FIELD_MISSING,
            {"field": "content_type"}
        )

    # Read file content
    content = await file.read()

    with tempfile.NamedTemporaryFile(delete=False, suffix=".csv") as tmp:
        tmp.write(content)
        tmp_path = tmp.name

    logger.info(f"Upload '{file.filename}' stored at {tmp_path}")
    try:
        result = await import_service.import_file(tmp_path, environment, content_type)
    finally:
        os.unlink(tmp_path)

    return result.to_dict()
