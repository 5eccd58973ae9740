from pydantic import BaseModel
from typing import List

# ---------------- Request / response schemas for document routes ----------------

class RegisterDocumentRequest(BaseModel):
    caller: str  # Ethereum-style address of the registrant
    document_hash: str
    document_name: str
    signature: str  # hex signature of the registration message

class SignatureCheckRequest(RegisterDocumentRequest):
    pass

class RegistrationMessageResponse(BaseModel):
    message: str

class UserDocumentsPage(BaseModel):
    documents: List[dict]
    total: int
    offset: int
    has_more: bool
