"""Generic data types"""

from typing import Any, Optional


# Dict class to give a type to the token endpoint response
class TokenResponse(dict):
    """Token endpoint response representation"""

    # Bearer token to present to the userinfo endpoint
    access_token: str
    token_type: str
    expires_in: int
    scope: str
    id_token: str
    # Only present when the provider rejected the request (e.g. invalid_grant)
    error: str
    error_description: str


# Dict class to give a type to the decoded userinfo claims
class ClaimsPayload(dict):
    """Userinfo claims representation"""

    # Subject, the provider-assigned stable identifier and our canonical user key
    sub: str
    name: str
    email: str
    phone_number: str
    birthdate: str
    # Either a formatted string or an OIDC address object
    address: Any


# Dict class to give a type to the record handed to the credential store
class UserRecord(dict):
    """Persisted user representation"""

    sub: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    date_of_birth: Optional[str]
    address: Optional[str]
    created_at: str
    updated_at: str
