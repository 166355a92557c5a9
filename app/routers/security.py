from fastapi import Depends, Header

from app.container import get_token_validator
from app.exceptions import AuthenticationError
from app.services.auth.token_validator import TokenValidator


def require_bearer_token(
    authorization: str | None = Header(default=None),
    validator: TokenValidator = Depends(get_token_validator),
) -> str:
    """
    Returns the Authorization header unchanged, to be forwarded to the backend.
    """
    if authorization is None or authorization.strip() == "":
        raise AuthenticationError("Authorization header is required")

    if not validator.validate(authorization):
        raise AuthenticationError("Invalid or expired token")

    return authorization
