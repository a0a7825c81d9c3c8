"""
MyInfo Client SDK for Python

Relying-party client for the MyInfo and MyInfo Business APIs
Implements PKI_SIGN request signing, token exchange, JWE decryption and JWS verification
"""

# Primary exports - recommended usage
from .business import MyInfoBusinessClient
from .config import MyInfoConfig
from .personal import MyInfoPersonalClient
from .relying_party import RelyingPartyClient, create_client

# Error exports for better error handling
from .errors import (
    MyInfoConfigurationError,
    MyInfoDecryptionError,
    MyInfoError,
    MyInfoErrorCodes,
    MyInfoNetworkError,
    MyInfoResponseFormatError,
    MyInfoSigningError,
    MyInfoVerificationError,
)

# Building blocks for advanced usage
from .canonical import build_url, canonical_query_string, join_attributes
from .envelope import EncryptedEnvelope, decrypt_envelope, parse_envelope
from .log import ClientLogger, NullLogger, configure_logging, get_logger
from .signing import SignedRequest, sign_request
from .subject import CompositeSubject, parse_subject
from .transport import ResourceFetchClient, TokenExchangeClient
from .verification import verify_token

# Version exports
from .version import SDK_LANGUAGE, SDK_VERSION

__version__ = SDK_VERSION
__all__ = [
    # Primary classes
    "MyInfoBusinessClient",
    "MyInfoPersonalClient",
    "MyInfoConfig",
    "RelyingPartyClient",
    "create_client",
    # Error classes
    "MyInfoError",
    "MyInfoConfigurationError",
    "MyInfoSigningError",
    "MyInfoNetworkError",
    "MyInfoResponseFormatError",
    "MyInfoDecryptionError",
    "MyInfoVerificationError",
    "MyInfoErrorCodes",
    # Version constants
    "SDK_VERSION",
    "SDK_LANGUAGE",
    # Building blocks
    "canonical_query_string",
    "build_url",
    "join_attributes",
    "sign_request",
    "SignedRequest",
    "TokenExchangeClient",
    "ResourceFetchClient",
    "parse_envelope",
    "decrypt_envelope",
    "EncryptedEnvelope",
    "verify_token",
    "parse_subject",
    "CompositeSubject",
    # Logging
    "ClientLogger",
    "NullLogger",
    "configure_logging",
    "get_logger",
]
