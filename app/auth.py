# app/auth.py
from __future__ import annotations
from typing import Optional
from fastapi import Security, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
import httpx
import hashlib
import logging

from app.core.logging import set_request_context
from app.domain.models.user_model import UserContext
from app.infrastructure.clients.auth_client import AuthClient


logger = logging.getLogger("auth")

_auth_client: Optional[AuthClient] = None  # privado no módulo
bearer_scheme = HTTPBearer(auto_error=False)

def _safe_token_id(token: str) -> str:
    # não loga o token; loga um identificador abreviado
    return hashlib.sha1(token.encode()).hexdigest()[:8]

def set_auth_client(client: Optional[AuthClient]) -> None:
    """Injeta o client (lifespan ou testes)."""
    global _auth_client
    _auth_client = client

def get_auth_client() -> Optional[AuthClient]:
    return _auth_client


def _ensure_client() -> AuthClient:
    global _auth_client
    if _auth_client is not None:
        return _auth_client
    # cria on-demand a partir de settings
    from app.config import settings

    if not settings.auth_base_url:
        logger.error("AUTH_BASE_URL ausente; não dá para inicializar AuthClient")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="Auth service unavailable")

    _auth_client = AuthClient(
        base_url=settings.auth_base_url,
        timeout_seconds=settings.auth_timeout_seconds,
        cache_ttl=settings.auth_cache_ttl_seconds,
    )
    logger.info("AuthClient criado on-demand (base_url=%s)", settings.auth_base_url)
    return _auth_client

async def _fetch_me(token: str):
    tid = _safe_token_id(token)
    client = _ensure_client()

    try:
        logger.debug("Chamando /me (token_id=%s)", tid)
        data = await client.me(token)
        logger.info("Auth OK (token_id=%s)", tid)
        return data
    except httpx.HTTPStatusError as e:
        sc = e.response.status_code
        logger.warning("HTTPStatusError em /me (status=%s url=%s token_id=%s)", sc, e.request.url, tid)
        if sc in (401, 403):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to validate token with auth service")
    except httpx.RequestError as e:
        # inclui TimeoutException
        logger.error("Erro de rede em /me (token_id=%s): %s", tid, e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth service unreachable")

async def require_user(
    credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)
) -> UserContext:
    """
    Dependency principal. Valida o Bearer e devolve o usuário autenticado.
    """
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = credentials.credentials.strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Empty bearer token")

    payload = await _fetch_me(token)

    try:
        user = UserContext.model_validate(payload)
    except ValidationError as e:
        logger.error("Payload inválido do /me (token_id=%s): %s", _safe_token_id(token), e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Invalid /me payload")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    set_request_context(user_id=user.id)
    return user
