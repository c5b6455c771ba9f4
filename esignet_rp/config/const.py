"""Config constants."""

## ===
## General constants
## ===

DEFAULT_TITLE = "eSignet Relying Party"

## ===
## Provider endpoints, relative to the eSignet service URL
## ===

TOKEN_ENDPOINT_PATH = "/oauth/v2/token"
USERINFO_ENDPOINT_PATH = "/oidc/userinfo"

## ===
## Client authentication (RFC 7523 private_key_jwt)
## ===

CLIENT_ASSERTION_TYPE_JWT_BEARER = (
    "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"
)
CLIENT_ASSERTION_SIGNING_ALGORITHM = "RS256"
# Providers reject assertions older than this
CLIENT_ASSERTION_LIFETIME_SECONDS = 5 * 60

DEFAULT_GRANT_TYPE = "authorization_code"

## ===
## Userinfo response handling
## ===

USERINFO_RESPONSE_TYPE_JWT = "jwt"
USERINFO_RESPONSE_TYPE_JWE = "jwe"

# Key management and content encryption algorithms accepted for userinfo JWEs.
# joserfc does not enable RSA-OAEP-256 by default, eSignet uses it.
USERINFO_JWE_ALGORITHMS = [
    "RSA-OAEP-256",
    "RSA-OAEP",
    "A128GCM",
    "A192GCM",
    "A256GCM",
    "A128CBC-HS256",
    "A192CBC-HS384",
    "A256CBC-HS512",
]

## ===
## Network defaults
## ===

DEFAULT_REQUEST_TIMEOUT = 10.0

# Delegate service listener
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8888
