"""
Client configuration for the MyInfo API

The configuration is validated and sanitized once, when it is constructed,
and is read-only afterwards so it can be shared by concurrent calls.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import MyInfoConfigurationError, MyInfoErrorCodes

KeyMaterial = Union[str, bytes, Any]

REQUIRED_FIELDS = (
    "client_id",
    "client_secret",
    "client_private_key",
    "counterparty_public_key",
    "api_base_url",
    "redirect_endpoint",
)

_TRUE_VALUES = ("1", "true", "yes", "on")


def _strip_trailing_newline(value: KeyMaterial) -> KeyMaterial:
    if isinstance(value, str) and value.endswith("\n"):
        return value[:-1]
    if isinstance(value, bytes) and value.endswith(b"\n"):
        return value[:-1]
    return value


def load_private_key(private_key: KeyMaterial, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key

    Args:
        private_key: PEM text/bytes or an already loaded RSA private key
        password: Password for encrypted PEM keys

    Returns:
        RSA private key object
    """
    try:
        if isinstance(private_key, str):
            loaded = serialization.load_pem_private_key(private_key.encode(), password=password)
        elif isinstance(private_key, bytes):
            loaded = serialization.load_pem_private_key(private_key, password=password)
        else:
            loaded = private_key
    except Exception as error:
        raise MyInfoConfigurationError(
            f"Invalid private key data: {str(error)}", MyInfoErrorCodes.INVALID_KEY_DATA, error
        ) from error

    if not isinstance(loaded, rsa.RSAPrivateKey):
        raise MyInfoConfigurationError(
            "MyInfo requires an RSA private key for signing and decryption", MyInfoErrorCodes.UNSUPPORTED_KEY_TYPE
        )

    return loaded


def load_public_key(public_key: KeyMaterial) -> rsa.RSAPublicKey:
    """
    Load the counterparty RSA public key

    Accepts a PEM public key, a PEM X.509 certificate (as published by MyInfo)
    or an already loaded key or certificate object.
    """
    try:
        if isinstance(public_key, str):
            public_key = public_key.encode()
        if isinstance(public_key, bytes):
            if b"-----BEGIN CERTIFICATE-----" in public_key:
                loaded = x509.load_pem_x509_certificate(public_key).public_key()
            else:
                loaded = serialization.load_pem_public_key(public_key)
        elif isinstance(public_key, x509.Certificate):
            loaded = public_key.public_key()
        else:
            loaded = public_key
    except Exception as error:
        raise MyInfoConfigurationError(
            f"Invalid public key data: {str(error)}", MyInfoErrorCodes.INVALID_KEY_DATA, error
        ) from error

    if not isinstance(loaded, rsa.RSAPublicKey):
        raise MyInfoConfigurationError(
            "MyInfo signatures require an RSA public key", MyInfoErrorCodes.UNSUPPORTED_KEY_TYPE
        )

    return loaded


@dataclass(frozen=True)
class MyInfoConfig:
    """
    Configuration shared by the MyInfo clients

    Args:
        client_id: Client ID provided by MyInfo, also known as App ID
        client_secret: Client secret provided by MyInfo
        client_private_key: RSA private key whose public key was given to MyInfo
            during onboarding, used for request signing and response decryption
        counterparty_public_key: MyInfo public key or certificate for verifying signatures
        api_base_url: Base URL of the API, e.g. https://test.api.myinfo.gov.sg/biz/v2
        redirect_endpoint: Endpoint the user is redirected to after login
        purpose: Default purpose shown to the user on the consent page
        requested_attributes: Default attributes requested from the user
        singpass_eservice_id: SingPass e-service ID (personal variant only)
        private_key_password: Password for an encrypted private key PEM
        encrypted_responses: Whether resource responses are encrypted envelopes
            (False for deployments that return plain JSON)
        verify_not_before: Whether to enforce the nbf claim. Disabling it tolerates
            clock skew between MyInfo and this host at the cost of accepting
            tokens that are not yet valid
        clock_tolerance: Leeway in seconds applied to exp/nbf checks
        timeout: Request timeout in milliseconds
        hide_user_agent_version: If True, omit version details from User-Agent header
    """

    client_id: str
    client_secret: str
    client_private_key: KeyMaterial = field(repr=False)
    counterparty_public_key: KeyMaterial = field(repr=False)
    api_base_url: str
    redirect_endpoint: str
    purpose: str = ""
    requested_attributes: Tuple[str, ...] = ()
    singpass_eservice_id: str = ""
    private_key_password: Optional[bytes] = field(default=None, repr=False)
    encrypted_responses: bool = True
    verify_not_before: bool = True
    clock_tolerance: int = 0
    timeout: int = 10000
    hide_user_agent_version: bool = False
    signing_key: rsa.RSAPrivateKey = field(init=False, repr=False, compare=False)
    verification_key: rsa.RSAPublicKey = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise MyInfoConfigurationError(
                    f'Config parameter "{name}" cannot be empty.', MyInfoErrorCodes.CONFIG_REQUIRED
                )

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise MyInfoConfigurationError(
                f"timeout must be a positive number of milliseconds, got {self.timeout!r}",
                MyInfoErrorCodes.INVALID_CONFIG,
            )

        # One-time sanitization, the instance is frozen afterwards
        set_field = object.__setattr__
        set_field(self, "api_base_url", self.api_base_url.rstrip("/"))
        set_field(self, "client_private_key", _strip_trailing_newline(self.client_private_key))
        set_field(self, "counterparty_public_key", _strip_trailing_newline(self.counterparty_public_key))
        set_field(self, "requested_attributes", tuple(self.requested_attributes or ()))
        set_field(self, "signing_key", load_private_key(self.client_private_key, self.private_key_password))
        set_field(self, "verification_key", load_public_key(self.counterparty_public_key))

    @classmethod
    def from_env(cls, prefix: str = "MYINFO_", environ=None, **overrides) -> "MyInfoConfig":
        """
        Build a configuration from environment variables

        Keys can be given inline (``MYINFO_CLIENT_PRIVATE_KEY``, ``MYINFO_PUBLIC_KEY``)
        or as paths (``MYINFO_CLIENT_PRIVATE_KEY_FILE``, ``MYINFO_PUBLIC_KEY_FILE``).
        Keyword overrides take precedence over the environment.
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str = "") -> str:
            return env.get(prefix + name, default)

        def get_key(name: str) -> str:
            inline = get(name)
            if inline:
                return inline.replace("\\n", "\n")
            path = get(name + "_FILE")
            if not path:
                return ""
            try:
                return Path(path).read_text()
            except OSError as error:
                raise MyInfoConfigurationError(
                    f"Cannot read key file {path}: {str(error)}", MyInfoErrorCodes.INVALID_KEY_DATA, error
                ) from error

        values = {
            "client_id": get("CLIENT_ID"),
            "client_secret": get("CLIENT_SECRET"),
            "client_private_key": get_key("CLIENT_PRIVATE_KEY"),
            "counterparty_public_key": get_key("PUBLIC_KEY"),
            "api_base_url": get("API_BASE_URL"),
            "redirect_endpoint": get("REDIRECT_ENDPOINT"),
            "purpose": get("PURPOSE"),
            "requested_attributes": tuple(a.strip() for a in get("ATTRIBUTES").split(",") if a.strip()),
            "singpass_eservice_id": get("SINGPASS_ESERVICE_ID"),
            "encrypted_responses": get("ENCRYPTED_RESPONSES", "true").lower() in _TRUE_VALUES,
            "verify_not_before": get("VERIFY_NOT_BEFORE", "true").lower() in _TRUE_VALUES,
        }

        password = get("CLIENT_PRIVATE_KEY_PASSWORD")
        if password:
            values["private_key_password"] = password.encode()

        for name, cast in (("TIMEOUT", int), ("CLOCK_TOLERANCE", int)):
            raw = get(name)
            if raw:
                try:
                    values[name.lower()] = cast(raw)
                except ValueError as error:
                    raise MyInfoConfigurationError(
                        f"{prefix}{name} must be an integer, got {raw!r}", MyInfoErrorCodes.INVALID_CONFIG, error
                    ) from error

        values.update(overrides)
        return cls(**values)
