"""
Verification of signed tokens (JWS) issued by MyInfo

An unverifiable token is an expected outcome (tampered, expired or issued by
someone else), so verification reports failure by returning None instead of
raising.
"""

from typing import Any, Dict, Optional, Union

import jose.jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose.exceptions import JOSEError

from .log import ClientLogger, NullLogger

SIGNING_ALGORITHM = "RS256"
TOKEN_SEGMENTS = 3


def public_key_pem(public_key: Union[str, bytes, rsa.RSAPublicKey]) -> bytes:
    """SubjectPublicKeyInfo PEM for a public key"""
    if isinstance(public_key, str):
        return public_key.encode("utf-8")
    if isinstance(public_key, bytes):
        return public_key
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM, format=serialization.PublicFormat.SubjectPublicKeyInfo
    )


def verify_token(
    token: Optional[str],
    public_key: Union[str, bytes, rsa.RSAPublicKey],
    verify_not_before: bool = True,
    clock_tolerance: int = 0,
    logger: Optional[ClientLogger] = None,
) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWS (JSON Web Signature) or JWT (JSON Web Token)

    Args:
        token: Compact JWS
        public_key: MyInfo public key (PEM or key object)
        verify_not_before: Whether to enforce the nbf claim
        clock_tolerance: Leeway in seconds for exp/nbf
        logger: Optional logger for the failure reason

    Returns:
        Claims, or None if the token is malformed, uses an algorithm other than
        RS256, has an invalid signature or has expired. Example claims of an
        access token:
            {
                "sub": "12345678A_499bb4c4-7462-0716-41ac-71fcb021a548",
                "scope": ["basic-profile", "uinfin", "name"],
                "aud": "STG2-MYINFOBIZ-SELF-TEST",
                "iss": "https://test.api.myinfo.gov.sg/serviceauth/myinfo-biz",
                "iat": 1662720023,
                "nbf": 1662720023,
                "exp": 1662721823
            }
    """
    logger = logger or NullLogger()

    if not token or not isinstance(token, str):
        logger.warning("token_verification_failed", reason="missing token")
        return None

    token = token.strip()
    if len(token.split(".")) != TOKEN_SEGMENTS:
        logger.warning("token_verification_failed", reason="token is not a compact JWS")
        return None

    try:
        header = jose.jwt.get_unverified_header(token)
    except JOSEError as error:
        logger.warning("token_verification_failed", reason=f"invalid header: {str(error)}")
        return None

    if header.get("alg") != SIGNING_ALGORITHM:
        logger.warning("token_verification_failed", reason=f"unsupported algorithm {header.get('alg')!r}")
        return None

    if public_key is None:
        logger.warning("token_verification_failed", reason="no public key configured")
        return None

    try:
        claims = jose.jwt.decode(
            token,
            public_key_pem(public_key),
            algorithms=[SIGNING_ALGORITHM],
            options={
                "verify_aud": False,
                "verify_iat": False,
                "verify_sub": False,
                "verify_jti": False,
                "verify_at_hash": False,
                "verify_nbf": verify_not_before,
                "verify_exp": True,
                "leeway": clock_tolerance,
            },
        )
    except JOSEError as error:
        logger.warning("token_verification_failed", reason=str(error))
        return None
    except (ValueError, TypeError) as error:
        logger.warning("token_verification_failed", reason=f"unusable public key: {str(error)}")
        return None

    if not isinstance(claims, dict):
        logger.warning("token_verification_failed", reason="payload is not a JSON object")
        return None

    return claims

