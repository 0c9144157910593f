import logging
from typing import Any, Dict, List, Optional

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model

logger = logging.getLogger("cc_core.auth")


class BearerTokenAuthMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        token = _extract_bearer_token(request)
        if token:
            claims = _verify_token(token)
            if claims:
                user = _get_or_create_user_from_claims(claims)
                if user:
                    request.user = user
                    request._cached_user = user
                    request._dont_enforce_csrf_checks = True
                    request.token_scopes = _scopes(claims)
        return self.get_response(request)


def _extract_bearer_token(request) -> str:
    header = request.headers.get("Authorization", "")
    if not header:
        return ""
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


def _verify_token(token: str) -> Optional[Dict[str, Any]]:
    secret = settings.CC_TOKEN_SECRET
    if not secret:
        return None
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=settings.CC_TOKEN_AUDIENCE,
            options={"verify_exp": True},
        )
    except jwt.PyJWTError as exc:
        logger.info("rejected bearer token: %s", exc)
        return None


def _scopes(claims: Dict[str, Any]) -> List[str]:
    scope = claims.get("scope") or []
    if isinstance(scope, str):
        return [item for item in scope.split() if item]
    return [str(item) for item in scope if item]


def _get_or_create_user_from_claims(claims: Dict[str, Any]):
    username = str(claims.get("user_name") or claims.get("sub") or "").strip()
    if not username:
        return None
    email = str(claims.get("email") or "").strip().lower()
    User = get_user_model()
    user, created = User.objects.get_or_create(
        username=username,
        defaults={"email": email, "is_active": True},
    )
    if not user.is_active:
        return None
    if not created and email and user.email != email:
        user.email = email
        user.save(update_fields=["email"])
    return user
