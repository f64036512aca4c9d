from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.inventory.core.principal import CLAIM_ROLE, CLAIM_STORE_ID, CLAIM_SUBJECT
from app.inventory.core.security import decode_token


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Copies bearer claims onto ``request.state`` for request logs.

    Authorization never reads these values; routes get an explicit
    ``Principal`` from ``get_current_principal`` instead.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.tenant_id = None
        request.state.user_id = None
        request.state.role = None

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.lower().startswith("bearer "):
            token = auth_header.split(" ", 1)[1]
            try:
                payload = decode_token(token)
            except JWTError:
                payload = {}
            request.state.tenant_id = payload.get(CLAIM_STORE_ID)
            request.state.user_id = payload.get(CLAIM_SUBJECT)
            request.state.role = payload.get(CLAIM_ROLE)

        return await call_next(request)
