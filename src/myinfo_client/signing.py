"""
PKI_SIGN request signing

Every request to MyInfo carries an Authorization header holding an
RSA-SHA256 signature over a canonical base string built from the HTTP
method, the URL without its query string and the sorted, unencoded
request parameters.
"""

import base64
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .canonical import canonical_query_string
from .errors import MyInfoErrorCodes, MyInfoSigningError

SIGNATURE_METHOD = "RS256"
AUTH_SCHEME = "PKI_SIGN"
NONCE_BYTES = 32


def generate_timestamp() -> str:
    """Current epoch time in milliseconds as a decimal string"""
    return str(int(time.time() * 1000))


def generate_nonce() -> str:
    """32 cryptographically random bytes, base64-encoded"""
    return base64.b64encode(secrets.token_bytes(NONCE_BYTES)).decode("ascii")


def build_base_string(
    method: str, url: str, params: Optional[Mapping[str, Any]], app_id: str, nonce: str, timestamp: str
) -> str:
    """
    Build the string to sign

    The auth fields are merged after the caller's params so they win on a
    key collision. The url must not contain a query string.
    """
    auth_params: Dict[str, Any] = dict(params or {})
    auth_params.update(
        {
            "app_id": app_id,
            "nonce": nonce,
            "signature_method": SIGNATURE_METHOD,
            "timestamp": timestamp,
        }
    )
    param_string = canonical_query_string(auth_params, encode=False)
    return f"{str(method).upper()}&{url}&{param_string}"


@dataclass(frozen=True)
class SignedRequest:
    """A signed request and the values that went into its signature"""

    method: str
    url: str
    params: Dict[str, Any]
    app_id: str
    timestamp: str
    nonce: str
    signature: str = field(repr=False)
    base_string: str = field(repr=False)

    def authorization_header(self, bearer: Optional[str] = None) -> str:
        """
        Content of the Authorization header

        Args:
            bearer: Access token appended as ",Bearer <token>" for resource requests
        """
        header = (
            f'{AUTH_SCHEME} timestamp="{self.timestamp}",nonce="{self.nonce}",app_id="{self.app_id}"'
            f',signature_method="{SIGNATURE_METHOD}",signature="{self.signature}"'
        )
        if bearer:
            header += f",Bearer {bearer}"
        return header


def sign_request(
    method: str,
    url: str,
    params: Optional[Mapping[str, Any]],
    app_id: str,
    private_key: rsa.RSAPrivateKey,
    timestamp: Optional[str] = None,
    nonce: Optional[str] = None,
) -> SignedRequest:
    """
    Sign a request with the PKI_SIGN scheme

    Args:
        method: HTTP method, e.g. GET or POST
        url: Endpoint without query string
        params: Query or form parameters sent with the request, not pre-encoded
        app_id: Client ID
        private_key: RSA private key registered with MyInfo
        timestamp: Fixed timestamp (generated when omitted)
        nonce: Fixed nonce (generated when omitted)

    Returns:
        SignedRequest
    """
    if private_key is None:
        raise MyInfoSigningError("No private key available for signing", MyInfoErrorCodes.NO_PRIVATE_KEY)
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise MyInfoSigningError(
            f"PKI_SIGN requires an RSA private key, got {type(private_key).__name__}", MyInfoErrorCodes.SIGNING_FAILED
        )

    timestamp = timestamp or generate_timestamp()
    nonce = nonce or generate_nonce()
    base_string = build_base_string(method, url, params, app_id, nonce, timestamp)

    try:
        signature = private_key.sign(base_string.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    except Exception as error:
        raise MyInfoSigningError(f"Request signing failed: {str(error)}", MyInfoErrorCodes.SIGNING_FAILED, error) from error

    return SignedRequest(
        method=str(method).upper(),
        url=url,
        params=dict(params or {}),
        app_id=app_id,
        timestamp=timestamp,
        nonce=nonce,
        signature=base64.b64encode(signature).decode("ascii"),
        base_string=base_string,
    )

