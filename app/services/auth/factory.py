from app.config import ConfigAuth
from app.services.auth.token_validator import (
    JwtTokenValidator,
    NullTokenValidator,
    TokenValidator,
)


class TokenValidatorFactory:
    def __init__(self, config: ConfigAuth) -> None:
        self.__config = config

    def create(self) -> TokenValidator:
        match (self.__config.enabled, self.__config.jwt_secret):
            case (False, _):
                return NullTokenValidator()
            case (True, str() as secret):
                return JwtTokenValidator(secret=secret, algorithm=self.__config.jwt_algorithm)
            case _:
                raise ValueError(
                    "auth.jwt_secret cannot be empty when auth is enabled, please fix in app.conf"
                )
