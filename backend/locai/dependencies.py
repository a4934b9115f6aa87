from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from locai.config import settings

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TenantContext:
    tenant_id: str
    user_id: str | None = None


def create_access_token(tenant_id: str, user_id: str | None = None, **claims) -> str:
    payload = {"tenant_id": tenant_id, **claims}
    if user_id:
        payload["sub"] = user_id
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


async def get_current_tenant(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TenantContext:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Autenticação necessária",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    try:
        payload = jwt.decode(credentials.credentials, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise unauthorized

    tenant_id = payload.get("tenant_id")
    if not tenant_id:
        raise unauthorized
    return TenantContext(tenant_id=tenant_id, user_id=payload.get("sub"))
