from abc import ABC, abstractmethod
import logging
from typing import Any, Dict

import jwt

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def strip_bearer(authorization: str) -> str:
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX):].strip()
    return value


class TokenValidator(ABC):
    """
    Decides whether an inbound Authorization header may be forwarded to the backend. The header
    itself is never changed.
    """

    @abstractmethod
    def validate(self, authorization: str) -> bool:
        ...

    @abstractmethod
    def get_claims(self, authorization: str) -> Dict[str, Any]:
        ...


class NullTokenValidator(TokenValidator):
    """
    Accepts any non-empty header. The backend remains the one checking the credential.
    """

    def validate(self, authorization: str) -> bool:
        return strip_bearer(authorization) != ""

    def get_claims(self, authorization: str) -> Dict[str, Any]:
        return {}


class JwtTokenValidator(TokenValidator):
    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self.__secret = secret
        self.__algorithm = algorithm

    def get_claims(self, authorization: str) -> Dict[str, Any]:
        claims: Dict[str, Any] = jwt.decode(
            strip_bearer(authorization), self.__secret, algorithms=[self.__algorithm]
        )
        return claims

    def validate(self, authorization: str) -> bool:
        try:
            self.get_claims(authorization)
        except jwt.PyJWTError as e:
            logger.info(f"Rejected token: {e}")
            return False
        return True
