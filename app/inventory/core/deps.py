from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from app.inventory.core.principal import Principal
from app.inventory.core.security import verify_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_current_principal(request: Request, token: str = Depends(oauth2_scheme)) -> Principal:
    principal = verify_access_token(token)
    request.state.user_id = principal.subject_id
    request.state.tenant_id = principal.tenant_id
    request.state.role = principal.role.value
    return principal


__all__ = ["get_current_principal", "oauth2_scheme"]
