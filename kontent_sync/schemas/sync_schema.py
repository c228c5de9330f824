from pydantic import BaseModel, Field


class UnprocessedRecordSchema(BaseModel):
    """
        A CSV row that could not be synced.

        Attributes:
        - name (str): Item name derived from the row.
        - reason (str): Failure reason reported by Kontent, or the error message.
    """
    name: str
    reason: str


class SyncResultResponseSchema(BaseModel):
    processedCount: int = Field(..., ge=0)
    unprocessedCount: int = Field(..., ge=0)
    unprocessedRecords: list[UnprocessedRecordSchema]


class ContentTypeSchema(BaseModel):
    name: str
    codename: str

    model_config = {"from_attributes": True}


class ContentTypesResponseSchema(BaseModel):
    types: list[ContentTypeSchema]
