"""
MyInfoPersonalClient - client for the MyInfo (v3) Person API
"""

from typing import Any, Dict, Iterable, Optional

from .canonical import build_url, join_attributes
from .config import MyInfoConfig
from .decoder import ResponseDecoder
from .errors import MyInfoConfigurationError, MyInfoErrorCodes, MyInfoVerificationError
from .log import ClientLogger, NullLogger
from .transport import ResourceFetchClient, TokenExchangeClient

ENDPOINT_AUTHORISE = "authorise"
ENDPOINT_PERSON = "person"
ENDPOINT_TOKEN = "token"


class MyInfoPersonalClient:
    """
    MyInfoPersonalClient - client for the MyInfo (v3) Person API

    The access token subject is the user's UIN/FIN, which is used as is to
    address the Person endpoint.
    """

    variant = "personal"

    def __init__(self, config: MyInfoConfig, logger: Optional[ClientLogger] = None):
        """
        Initialize MyInfoPersonalClient

        Args:
            config: Validated client configuration, singpass_eservice_id is required
            logger: Optional logger, defaults to discarding log events
        """
        if not config.singpass_eservice_id:
            raise MyInfoConfigurationError(
                'Config parameter "singpass_eservice_id" cannot be empty.', MyInfoErrorCodes.CONFIG_REQUIRED
            )

        self.config = config
        self.logger = logger or NullLogger()
        self.token_client = TokenExchangeClient(config, ENDPOINT_TOKEN, send_state=False, logger=self.logger)
        self.resource_client = ResourceFetchClient(config, logger=self.logger)
        self.decoder = ResponseDecoder(config, logger=self.logger)

    def create_redirect_url(
        self,
        purpose: Optional[str] = None,
        requested_attributes: Optional[Iterable[str]] = None,
        relay_state: Optional[str] = None,
        redirect_endpoint: Optional[str] = None,
    ) -> str:
        """Construct the SingPass login and consent URL, including the e-service ID"""
        if requested_attributes is None:
            requested_attributes = self.config.requested_attributes

        params = {
            "purpose": self.config.purpose if purpose is None else purpose,
            "attributes": join_attributes(requested_attributes),
            "state": relay_state or "",
            "client_id": self.config.client_id,
            "redirect_uri": redirect_endpoint or self.config.redirect_endpoint,
            "sp_esvcId": self.config.singpass_eservice_id,
        }
        return build_url(self.config.api_base_url, ENDPOINT_AUTHORISE, params)

    def build_login_url(self, relay_state: Optional[str] = None, **options) -> str:
        return self.create_redirect_url(relay_state=relay_state, **options)

    async def get_access_token(self, auth_code: str, relay_state: Optional[str] = None) -> str:
        """Retrieve the access token for an authorization code (the state is not sent)"""
        return await self.token_client.exchange(auth_code, relay_state)

    async def extract_uinfin(self, access_token: str) -> Optional[str]:
        claims = await self.decoder.verify(access_token)
        sub = (claims or {}).get("sub")
        return sub if isinstance(sub, str) and sub else None

    async def get_person(
        self, access_token: str, requested_attributes: Optional[Iterable[str]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Retrieve the requested attributes from the Person endpoint

        Returns:
            {"uinFin": "S1234567A", "data": {...}}, or None if the signed
            record inside the envelope does not verify
        """
        if requested_attributes is None:
            requested_attributes = self.config.requested_attributes

        uinfin = await self.extract_uinfin(access_token)
        if uinfin is None:
            self.logger.error("subject_unresolvable", endpoint=ENDPOINT_PERSON)
            raise MyInfoVerificationError(
                "Unable to extract UIN/FIN from access token.", MyInfoErrorCodes.SUBJECT_UNRESOLVABLE
            )

        params = self.resource_client.build_params(
            requested_attributes, {"sp_esvcId": self.config.singpass_eservice_id}
        )
        response = await self.resource_client.fetch(f"{ENDPOINT_PERSON}/{uinfin}/", access_token, params)

        if self.config.encrypted_responses:
            data = await self.decoder.decode(response)
            if data is None:
                return None
        else:
            data = response

        return {"uinFin": uinfin, "data": data}

    async def complete_login(self, auth_code: str, relay_state: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Exchange the authorization code and return the verified person record"""
        access_token = await self.get_access_token(auth_code, relay_state)
        return await self.get_person(access_token)
