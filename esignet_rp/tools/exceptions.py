"""Exceptions raised while completing an eSignet login."""

from typing import Optional


class IdentityFlowException(Exception):
    "Raised when the identity flow encounters an error"


class ConfigurationError(IdentityFlowException):
    "Raised when a key, URL or other required setting is missing or malformed."


class TransportError(IdentityFlowException):
    "Raised when the identity provider cannot be reached or answers with a non-2xx status."

    status: Optional[int]
    body: Optional[str]

    def __init__(
        self, message: str, status: Optional[int] = None, body: Optional[str] = None
    ):
        self.status = status
        self.body = body
        super().__init__(message)

    def __str__(self):
        message = super().__str__()
        if self.body:
            return f"{message} with response body: {self.body}"
        return message


class ProviderError(IdentityFlowException):
    "Raised when the token response carries an OAuth error, such as invalid_grant."

    error: str
    error_description: Optional[str]
    response: dict

    def __init__(self, error: str, error_description: Optional[str] = None, **kwargs):
        self.error = error
        self.error_description = error_description
        self.response = kwargs.pop("response", None) or {"error": error}

        message = f"Identity provider returned error: {error}"
        if error_description:
            message += f" ({error_description})"
        super().__init__(message)


class DecryptionError(IdentityFlowException):
    "Raised when none of the JWE serializations could decrypt the userinfo response."

    attempts: list

    def __init__(self, attempts: list):
        self.attempts = attempts
        super().__init__(
            "Userinfo response could not be decrypted: "
            + "; ".join(f"{attempt.name}: {attempt.error}" for attempt in attempts)
        )


class FormatError(IdentityFlowException):
    "Raised when a provider response is neither a decodable token nor a JSON object."
