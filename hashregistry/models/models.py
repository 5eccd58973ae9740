## Pydantic models shared by the registry services and the HTTP layer.
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional

# Registry Models
class DocumentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_hash: str
    document_name: str
    registered_by: str
    timestamp: int = Field(ge=0, lt=2**64)  # seconds since epoch (u64)
    block_number: int = Field(ge=0, lt=2**32)  # ledger sequence (u32)

class DocumentInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    exists: bool
    record: Optional[DocumentRecord] = None

    @model_validator(mode="after")
    def _record_iff_exists(self):
        if self.exists != (self.record is not None):
            raise ValueError("record must be present if and only if exists is true")
        return self

    @classmethod
    def found(cls, record: DocumentRecord) -> "DocumentInfo":
        return cls(exists=True, record=record)

    @classmethod
    def missing(cls) -> "DocumentInfo":
        return cls(exists=False, record=None)

# Event Models
DOCUMENT_REGISTERED_TOPIC = "DOC_REG"

class DocumentRegisteredEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_hash: str
    document_name: str
    registered_by: str
    timestamp: int

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentRegisteredEvent":
        return cls(
            document_hash=record.document_hash,
            document_name=record.document_name,
            registered_by=record.registered_by,
            timestamp=record.timestamp,
        )

# API Response Models
class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[dict] = None

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error_code: Optional[str] = None
