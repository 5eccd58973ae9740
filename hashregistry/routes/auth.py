# Helpers for clients preparing a signed registration
from fastapi import APIRouter, Query

from hashregistry.core.errors import AuthorizationFailure
from hashregistry.models.models import APIResponse
from hashregistry.schemas import RegistrationMessageResponse, SignatureCheckRequest
from hashregistry.services.auth import SignatureAuthGate
from hashregistry.utils.blockchain import registration_message

router = APIRouter()

@router.get("/registration-message", response_model=RegistrationMessageResponse)
def get_registration_message(document_hash: str = Query(...), document_name: str = Query(...)):
    """Message the caller must sign to register this hash under this name"""
    return RegistrationMessageResponse(message=registration_message(document_hash, document_name))

@router.post("/check", response_model=APIResponse)
def check_signature(request: SignatureCheckRequest):
    """Check a signature without registering anything"""
    gate = SignatureAuthGate(registration_message(request.document_hash, request.document_name), request.signature)
    try:
        gate.require_auth(request.caller)
    except AuthorizationFailure as e:
        return APIResponse(success=True, message=e.message, data={"authorized": False})
    return APIResponse(success=True, message="Signature matches caller", data={"authorized": True})
