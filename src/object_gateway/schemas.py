####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)
from pydantic.alias_generators import to_camel

DEFAULT_LIST_LIMIT = 1000
MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 1000


class CamelModel(BaseModel):
    """Snake-case attributes in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ObjectSummary(BaseModel):
    """One entry of `GET /list`."""
    name: str = Field(
        description="The key of the object.",
        json_schema_extra={"example": "reports/2024/q1.csv"},
    )
    size: int = Field(description="The size of the object in bytes.")
    uploaded: datetime = Field(description="When the object was written.")
    type: Optional[str] = Field(None, description="The content type, when the backend reports it.")

    @field_serializer("uploaded")
    def serialize_uploaded(self, uploaded: datetime) -> str:
        return uploaded.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ListObjectsResponse(BaseModel):
    """Response model for `GET /list`."""
    objects: List[ObjectSummary]
    truncated: bool
    cursor: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "objects": [
                    {
                        "name": "reports/2024/q1.csv",
                        "size": 512,
                        "uploaded": "2024-01-01T00:00:00+00:00",
                    }
                ],
                "truncated": True,
                "cursor": "1ueGcxLPRx1Tr/XYExHnhbYLgveDs2J/wm36Hy4vbOwM=",
            }
        }
    )



class PutObjectResponse(BaseModel):
    """Response model for `PUT /:key`."""
    key: str = Field(
        description="The key the object was stored under.",
        json_schema_extra={"example": "reports/2024/q1.csv"},
    )
    etag: str = Field(description="The entity tag the backend assigned.")
    size: int = Field(description="The number of bytes stored.")
    type: str = Field(description="The content type stored with the object.")


class DeleteObjectResponse(BaseModel):
    """Response model for `DELETE /:key`."""
    deleted: str


##############################
# --- Multipart requests --- #
##############################

class CompletedPart(CamelModel):
    part_number: int
    etag: str


class InitiateUpload(CamelModel):
    """Open a new session for ``key``."""
    key: str = Field(min_length=1)
    content_type: Optional[str] = None


class UploadPart(CamelModel):
    """Send one part of an open session; the request body is the part."""
    key: str = Field(min_length=1)
    upload_id: str = Field(min_length=1)
    part_number: int


class CompleteUpload(CamelModel):
    """Assemble an open session from its uploaded parts."""
    key: str = Field(min_length=1)
    upload_id: str = Field(min_length=1)
    parts: List[CompletedPart] = Field(min_length=1)


MultipartRequest = Union[InitiateUpload, UploadPart, CompleteUpload]


class InitiateUploadResponse(CamelModel):
    upload_id: str


class UploadPartResponse(CamelModel):
    etag: str
    part_number: int


class CompleteUploadResponse(CamelModel):
    key: str
    etag: str
