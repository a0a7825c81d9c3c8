"""
MyInfoBusinessClient - client for the MyInfo Business (v2) API
Builds the consent URL, exchanges the authorization code and retrieves
the decrypted, verified entity-person record
"""

from typing import Any, Dict, Iterable, Optional

from .canonical import build_url, join_attributes
from .config import MyInfoConfig
from .decoder import ResponseDecoder
from .errors import MyInfoErrorCodes, MyInfoVerificationError
from .log import ClientLogger, NullLogger
from .subject import CompositeSubject, parse_subject
from .transport import ResourceFetchClient, TokenExchangeClient

ENDPOINT_AUTHORISE = "authorise"
ENDPOINT_ENTITY_PERSON = "entity-person"
ENDPOINT_TOKEN = "token"


class MyInfoBusinessClient:
    """
    MyInfoBusinessClient - client for the MyInfo Business (v2) API

    Example:
        client = MyInfoBusinessClient(MyInfoConfig.from_env())
        url = client.create_redirect_url(relay_state=state)
        ...
        token = await client.get_access_token(code, state)
        record = await client.get_entity_person(token, ["basic-profile", "name"])
    """

    variant = "business"

    def __init__(self, config: MyInfoConfig, logger: Optional[ClientLogger] = None):
        """
        Initialize MyInfoBusinessClient

        Args:
            config: Validated client configuration
            logger: Optional logger, defaults to discarding log events
        """
        self.config = config
        self.logger = logger or NullLogger()
        self.token_client = TokenExchangeClient(config, ENDPOINT_TOKEN, send_state=True, logger=self.logger)
        self.resource_client = ResourceFetchClient(config, logger=self.logger)
        self.decoder = ResponseDecoder(config, logger=self.logger)

    def create_redirect_url(
        self,
        purpose: Optional[str] = None,
        requested_attributes: Optional[Iterable[str]] = None,
        relay_state: Optional[str] = None,
        redirect_endpoint: Optional[str] = None,
    ) -> str:
        """
        Construct the URL the user visits to log in with SingPass and consent
        to providing the requested attributes

        Args:
            purpose: Purpose shown to the user (defaults to config.purpose)
            requested_attributes: Attributes the user must consent to provide
                (defaults to config.requested_attributes)
            relay_state: State forwarded to the redirect endpoint
            redirect_endpoint: Alternative redirect endpoint (defaults to config)
        """
        if requested_attributes is None:
            requested_attributes = self.config.requested_attributes

        # no sp_esvcId unlike MyInfo Personal
        params = {
            "purpose": self.config.purpose if purpose is None else purpose,
            "attributes": join_attributes(requested_attributes),
            "state": relay_state or "",
            "client_id": self.config.client_id,
            "redirect_uri": redirect_endpoint or self.config.redirect_endpoint,
        }
        return build_url(self.config.api_base_url, ENDPOINT_AUTHORISE, params)

    def build_login_url(self, relay_state: Optional[str] = None, **options) -> str:
        return self.create_redirect_url(relay_state=relay_state, **options)

    async def get_access_token(self, auth_code: str, relay_state: Optional[str] = None) -> str:
        """Retrieve the access token (a JWT) for an authorization code"""
        return await self.token_client.exchange(auth_code, relay_state)

    async def extract_subject(self, access_token: str) -> Optional[CompositeSubject]:
        """Verify the access token and extract the UEN and UUID from its subject"""
        claims = await self.decoder.verify(access_token)
        return parse_subject(claims)

    async def get_entity_person(
        self, access_token: str, requested_attributes: Optional[Iterable[str]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Retrieve the requested attributes from the Entity-Person endpoint

        Args:
            access_token: Access token from get_access_token()
            requested_attributes: Attributes requested (defaults to config)

        Returns:
            Verified record, e.g. {"entity": {...}, "person": {...}}, or None if
            the signed record inside the envelope does not verify

        Raises:
            MyInfoVerificationError: UEN/UUID cannot be extracted from the access token
            MyInfoNetworkError: Connection failure, timeout or non-2xx response
            MyInfoDecryptionError: The envelope cannot be decrypted
        """
        if requested_attributes is None:
            requested_attributes = self.config.requested_attributes

        subject = await self.extract_subject(access_token)
        if subject is None:
            self.logger.error("subject_unresolvable", endpoint=ENDPOINT_ENTITY_PERSON)
            raise MyInfoVerificationError(
                "Unable to extract UEN/UUID from access token.", MyInfoErrorCodes.SUBJECT_UNRESOLVABLE
            )

        params = self.resource_client.build_params(requested_attributes)
        path = f"{ENDPOINT_ENTITY_PERSON}/{subject.uen}/{subject.uuid}"
        response = await self.resource_client.fetch(path, access_token, params)

        if not self.config.encrypted_responses:
            return response

        return await self.decoder.decode(response)

    async def complete_login(self, auth_code: str, relay_state: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Exchange the authorization code and return the verified entity-person record"""
        access_token = await self.get_access_token(auth_code, relay_state)
        return await self.get_entity_person(access_token)
