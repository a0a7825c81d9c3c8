"""
Decryption of the encrypted envelope (JWE) returned by MyInfo resource endpoints
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwe

from .errors import MyInfoDecryptionError, MyInfoErrorCodes

ENVELOPE_SEGMENTS = 5


def private_key_pem(private_key: Union[str, bytes, rsa.RSAPrivateKey]) -> bytes:
    """Unencrypted PKCS#8 PEM for a private key, the form jose loads directly"""
    if isinstance(private_key, str):
        return private_key.encode("utf-8")
    if isinstance(private_key, bytes):
        return private_key
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def base64url_decode(segment: str) -> bytes:
    """Decode a base64url segment, restoring any stripped padding"""
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


@dataclass(frozen=True)
class EncryptedEnvelope:
    """Compact JWE split into its five segments"""

    protected: str
    encrypted_key: str = field(repr=False)
    iv: str = field(repr=False)
    ciphertext: str = field(repr=False)
    tag: str = field(repr=False)
    header: Dict[str, Any] = field(default_factory=dict)

    @property
    def algorithm(self) -> str:
        return self.header.get("alg", "")

    @property
    def encryption(self) -> str:
        return self.header.get("enc", "")

    def compact(self) -> str:
        return ".".join((self.protected, self.encrypted_key, self.iv, self.ciphertext, self.tag))


def parse_envelope(envelope: Union[str, bytes]) -> EncryptedEnvelope:
    """
    Split and validate a compact encrypted envelope

    Args:
        envelope: Compact JWE serialization (5 dot-separated base64url segments)

    Returns:
        EncryptedEnvelope with the decoded protected header
    """
    if isinstance(envelope, bytes):
        try:
            envelope = envelope.decode("ascii")
        except UnicodeDecodeError as error:
            raise MyInfoDecryptionError(
                "Envelope is not an ASCII string", MyInfoErrorCodes.INVALID_ENVELOPE, error
            ) from error

    if not isinstance(envelope, str):
        raise MyInfoDecryptionError("Envelope must be a string", MyInfoErrorCodes.INVALID_ENVELOPE)

    parts = envelope.strip().split(".")
    if len(parts) != ENVELOPE_SEGMENTS:
        raise MyInfoDecryptionError(
            f"Invalid envelope: expected {ENVELOPE_SEGMENTS} segments, got {len(parts)}",
            MyInfoErrorCodes.INVALID_ENVELOPE,
        )

    protected, encrypted_key, iv, ciphertext, tag = parts

    try:
        header = json.loads(base64url_decode(protected).decode("utf-8"))
    except (binascii.Error, ValueError) as error:
        raise MyInfoDecryptionError(
            f"Invalid envelope header: {str(error)}", MyInfoErrorCodes.INVALID_ENVELOPE, error
        ) from error

    if not isinstance(header, dict) or "alg" not in header or "enc" not in header:
        raise MyInfoDecryptionError(
            "Invalid envelope header: alg and enc are required", MyInfoErrorCodes.INVALID_ENVELOPE
        )

    return EncryptedEnvelope(
        protected=protected,
        encrypted_key=encrypted_key,
        iv=iv,
        ciphertext=ciphertext,
        tag=tag,
        header=header,
    )


def decrypt_envelope(envelope: Union[str, bytes, EncryptedEnvelope], private_key: rsa.RSAPrivateKey) -> str:
    """
    Decrypt an envelope into the signed token it carries

    Some producers JSON-encode the inner token before encrypting it, others
    do not, so surrounding double quotes are removed from the plaintext.

    Args:
        envelope: Compact JWE or an already parsed EncryptedEnvelope
        private_key: RSA private key matching the public key registered with MyInfo

    Returns:
        Inner compact JWS
    """
    if not isinstance(envelope, EncryptedEnvelope):
        envelope = parse_envelope(envelope)

    if private_key is None:
        raise MyInfoDecryptionError("No private key available for decryption", MyInfoErrorCodes.DECRYPTION_FAILED)

    try:
        plaintext = jwe.decrypt(envelope.compact(), private_key_pem(private_key))
    except Exception as error:
        raise MyInfoDecryptionError(
            f"Decryption failed: {str(error)}", MyInfoErrorCodes.DECRYPTION_FAILED, error
        ) from error

    if plaintext is None:
        raise MyInfoDecryptionError("Decryption failed: empty plaintext", MyInfoErrorCodes.DECRYPTION_FAILED)

    try:
        token = plaintext.decode("utf-8")
    except UnicodeDecodeError as error:
        raise MyInfoDecryptionError(
            "Decrypted payload is not valid UTF-8", MyInfoErrorCodes.DECRYPTION_FAILED, error
        ) from error

    return token.strip().strip('"')
