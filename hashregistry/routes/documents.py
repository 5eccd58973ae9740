import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from hashregistry.core.errors import (
    AuthorizationFailure,
    DocumentAlreadyExists,
    InvalidDocumentName,
    InvalidHashLength,
    RegistryAlreadyInitialized,
    RegistryError,
    RegistryNotInitialized,
)
from hashregistry.models.models import APIResponse, ErrorResponse
from hashregistry.schemas import RegisterDocumentRequest, UserDocumentsPage
from hashregistry.services.auth import SignatureAuthGate
from hashregistry.services.registry import Registry
from hashregistry.utils.blockchain import canonical_identity, registration_message

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidHashLength: 400,
    InvalidDocumentName: 400,
    DocumentAlreadyExists: 409,
    AuthorizationFailure: 401,
    RegistryNotInitialized: 503,
    RegistryAlreadyInitialized: 409,
}

def get_registry(request: Request) -> Registry:
    return request.app.state.registry

async def registry_error_handler(request: Request, exc: RegistryError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    body = ErrorResponse(message=exc.message, error_code=exc.error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())

router = APIRouter()


@router.post("/register", response_model=APIResponse, status_code=201)
def register_document(request: RegisterDocumentRequest, registry: Registry = Depends(get_registry)):
    gate = SignatureAuthGate(
        registration_message(request.document_hash, request.document_name),
        request.signature,
    )
    count = registry.register_document(
        canonical_identity(request.caller), request.document_hash, request.document_name, auth=gate
    )
    info = registry.verify_document(request.document_hash)
    return APIResponse(
        success=True,
        message="Document registered",
        data={"count": count, "record": info.record.model_dump(mode="json")},
    )


@router.get("/verify/{document_hash:path}", response_model=APIResponse)
def verify_document(document_hash: str, registry: Registry = Depends(get_registry)):
    info = registry.verify_document(document_hash)
    message = "Document is registered" if info.exists else "Document not found"
    return APIResponse(success=True, message=message, data=info.model_dump(mode="json"))


@router.get("/count", response_model=APIResponse)
def get_document_count(registry: Registry = Depends(get_registry)):
    return APIResponse(success=True, message="Document count", data={"count": registry.get_document_count()})


@router.get("/users/{user}/documents", response_model=APIResponse)
def get_user_documents(
    user: str,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    registry: Registry = Depends(get_registry),
):
    records = registry.get_user_documents(canonical_identity(user))
    end = len(records) if limit is None else offset + limit
    page = UserDocumentsPage(
        documents=[r.model_dump(mode="json") for r in records[offset:end]],
        total=len(records),
        offset=offset,
        has_more=end < len(records),
    )
    return APIResponse(success=True, message="Documents for this user", data=page.model_dump())


# Names may contain "/", so they travel as a query parameter.
@router.get("/users/{user}/names/used", response_model=APIResponse)
def is_document_name_used(
    user: str,
    document_name: str = Query(...),
    registry: Registry = Depends(get_registry),
):
    used = registry.is_document_name_used(canonical_identity(user), document_name)
    return APIResponse(success=True, message="Name lookup", data={"used": used})


@router.get("/users/{user}/names", response_model=APIResponse)
def get_document_by_name(
    user: str,
    document_name: str = Query(...),
    registry: Registry = Depends(get_registry),
):
    info = registry.get_document_by_name(canonical_identity(user), document_name)
    message = "Document found" if info.exists else "Document not found"
    return APIResponse(success=True, message=message, data=info.model_dump(mode="json"))
