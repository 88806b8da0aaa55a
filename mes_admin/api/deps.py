from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mes_admin.core.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class Principal:
    """Caller identity extracted from the access token."""

    user_id: str
    tenant_id: str | None = None
    role: str | None = None


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Get the caller from the bearer JWT."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise _unauthorized()

    # Only access tokens are accepted here
    if payload.get("type") != "access":
        raise _unauthorized()

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized()

    return Principal(
        user_id=str(user_id),
        tenant_id=payload.get("tenant_id"),
        role=payload.get("role"),
    )


def get_tenant_id(
    principal: Principal = Depends(get_current_principal),
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-ID"),
) -> str:
    """
    Resolve the tenant every tenant-scoped operation runs in.

    The tenant bound to the token wins; callers without one (e.g. platform
    administrators) must name the tenant through the X-Tenant-ID header.
    """
    tenant_id = principal.tenant_id or (x_tenant_id.strip() if x_tenant_id else None)
    if not tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tenant context is required (token tenant_id or X-Tenant-ID header)",
        )
    return tenant_id


def require_roles(*role_names: str):
    """
    Create a dependency that requires the current caller to have one of the specified roles.

    Example:
        Depends(require_roles("admin"))
    """

    def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in role_names:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return principal

    return role_checker
