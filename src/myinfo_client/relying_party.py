"""
Relying-party login capability shared by the MyInfo clients

Each variant is a separate implementation of the same two-step login
(build the login URL, then complete the login from the callback), selected
once when the client is created.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .business import MyInfoBusinessClient
from .config import MyInfoConfig
from .errors import MyInfoConfigurationError, MyInfoErrorCodes
from .log import ClientLogger
from .personal import MyInfoPersonalClient

CLIENT_VARIANTS = {
    MyInfoBusinessClient.variant: MyInfoBusinessClient,
    MyInfoPersonalClient.variant: MyInfoPersonalClient,
}


@runtime_checkable
class RelyingPartyClient(Protocol):
    """Login flow as seen by the web application"""

    def build_login_url(self, relay_state: Optional[str] = None, **options) -> str:
        ...

    async def complete_login(self, auth_code: str, relay_state: Optional[str] = None) -> Optional[Dict[str, Any]]:
        ...


def create_client(
    config: MyInfoConfig, variant: str = "business", logger: Optional[ClientLogger] = None
) -> RelyingPartyClient:
    """
    Create the client for a MyInfo variant

    Args:
        config: Validated client configuration
        variant: "business" (MyInfo Business, entity-person) or "personal" (MyInfo, person)
        logger: Optional logger

    Returns:
        Client implementing RelyingPartyClient
    """
    client_class = CLIENT_VARIANTS.get(variant)
    if client_class is None:
        raise MyInfoConfigurationError(
            f"Unsupported client variant {variant!r}, expected one of {sorted(CLIENT_VARIANTS)}",
            MyInfoErrorCodes.UNSUPPORTED_VARIANT,
        )
    return client_class(config, logger=logger)
