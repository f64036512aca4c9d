from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request

from app.inventory.core.error_catalog import AppError
from app.inventory.db.session import get_db
from app.inventory.schemas.errors import ApiErrorResponse
from app.inventory.schemas.auth import LoginRequest, OAuth2TokenResponse, TokenResponse
from app.inventory.services.audit import AuditEventPayload, AuditService
from app.inventory.services.auth import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login (JSON)",
    responses={401: {"description": "Invalid username or password", "model": ApiErrorResponse}},
    description="Exchanges a username and password for a bearer token valid for two hours.",
)
async def login(request: Request, payload: LoginRequest, db=Depends(get_db)):
    service = AuthService(db)
    trace_id = getattr(request.state, "trace_id", "")

    try:
        user, issued = service.login(payload.username, payload.password)
    except AppError as exc:
        candidate = service.find_user(payload.username)
        if candidate is not None:
            AuditService(db).record_event(
                AuditEventPayload(
                    store_id=candidate.store_id,
                    user_id=str(candidate.id),
                    trace_id=trace_id or None,
                    actor=payload.username,
                    actor_role=candidate.role,
                    action="auth.login.failed",
                    entity_type="user",
                    entity_id=str(candidate.id),
                    before=None,
                    after={"error_code": exc.error.code},
                    result="failure",
                )
            )
        raise

    AuditService(db).record_event(
        AuditEventPayload.for_principal(
            issued.principal,
            action="auth.login",
            entity_type="user",
            entity_id=user.id,
            store_id=user.store_id,
            trace_id=trace_id,
        )
    )
    return TokenResponse(
        access_token=issued.access_token,
        role=issued.principal.role.value,
        expires_at=issued.expires_at,
        trace_id=trace_id,
    )


@router.post(
    "/token",
    response_model=OAuth2TokenResponse,
    summary="OAuth2 Token (Swagger/Auth)",
    description="OAuth2 Password Flow endpoint for Swagger Authorize using form-data username/password.",
)
async def oauth2_token(request: Request, db=Depends(get_db)):
    raw_body = (await request.body()).decode()
    form_data = parse_qs(raw_body)
    username = (form_data.get("username") or [""])[0]
    password = (form_data.get("password") or [""])[0]

    _, issued = AuthService(db).login(username, password)
    return OAuth2TokenResponse(access_token=issued.access_token)
