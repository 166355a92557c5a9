class DomainError(Exception):
    """
    Base class for every error the adapter surfaces to the FHIR layer. Each subclass carries a
    generic description that is used when no better message is available.
    """

    default_message = "An error occurred while processing the request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "The request is invalid"


class AuthenticationError(DomainError):
    default_message = "Authentication is required"


class NotFoundError(DomainError):
    default_message = "Resource not found"


class MappingError(DomainError):
    """
    A value could not be coerced to its expected shape. Callers normally recover by dropping the
    field; only identity-critical fields escalate to a ValidationError.
    """

    default_message = "A value could not be mapped"


class InternalError(DomainError):
    default_message = "The backend could not process the request"
