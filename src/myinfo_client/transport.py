"""
Signed HTTP calls to the MyInfo API

Each call opens its own aiohttp session, signs the request with PKI_SIGN and
fails fast: there are no internal retries because a retried request needs a
fresh timestamp and nonce, so the caller decides when to call again.
"""

import asyncio
import functools
import json
from typing import Any, Dict, Mapping, Optional, Union

import aiohttp
from yarl import URL

from .canonical import canonical_query_string, join_attributes
from .config import MyInfoConfig
from .errors import MyInfoErrorCodes, MyInfoNetworkError, MyInfoResponseFormatError
from .log import ClientLogger, NullLogger
from .signing import SignedRequest, sign_request
from .version import get_user_agent

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
MAX_LOGGED_BODY = 500


async def send_request(
    url: str,
    method: str = "GET",
    body: Optional[Mapping[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 10000,
    parse_json: bool = True,
) -> Union[str, Any]:
    """
    Send HTTP request

    Args:
        url: Full URL, query string already canonical and encoded
        method: HTTP method, GET or POST
        body: Form fields, sent as a canonical urlencoded string
        headers: Request headers
        timeout: Request timeout in milliseconds
        parse_json: Whether to parse the response body as JSON. Set to False when
            the response is a compact JWE or JWS

    Returns:
        Parsed JSON, or the raw body text when parse_json is False
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout / 1000.0)
    data = canonical_query_string(body) if body is not None else None

    try:
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.request(method, URL(url, encoded=True), data=data, headers=headers or {}) as response:
                body_bytes = await response.read()
                charset = response.charset or "utf-8"

                if not 200 <= response.status < 300:
                    detail = body_bytes[:MAX_LOGGED_BODY].decode("utf-8", errors="replace")
                    raise MyInfoNetworkError(
                        f"HTTP {response.status}: {response.reason}. {detail}".strip(),
                        MyInfoErrorCodes.HTTP_ERROR,
                        status=response.status,
                    )
    except asyncio.TimeoutError as error:
        raise MyInfoNetworkError(
            f"Request timeout after {timeout}ms", MyInfoErrorCodes.NETWORK_TIMEOUT, error
        ) from error
    except aiohttp.ClientError as error:
        raise MyInfoNetworkError(
            f"Request to {url} failed: {str(error)}", MyInfoErrorCodes.CONNECTION_FAILED, error
        ) from error

    try:
        raw_body = body_bytes.decode(charset)
    except (LookupError, UnicodeDecodeError) as error:
        raise MyInfoResponseFormatError(
            f"Could not decode body as {charset}: {str(error)}", MyInfoErrorCodes.INVALID_ENCODING, error
        ) from error

    if not parse_json:
        return raw_body

    try:
        return json.loads(raw_body)
    except ValueError as error:
        raise MyInfoResponseFormatError(
            f"Could not parse body into JSON: {raw_body[:MAX_LOGGED_BODY]}", MyInfoErrorCodes.INVALID_JSON, error
        ) from error


async def sign_in_executor(method: str, url: str, params: Mapping[str, Any], config: MyInfoConfig) -> SignedRequest:
    """Sign a request in the default executor so RSA signing does not block the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, functools.partial(sign_request, method, url, params, config.client_id, config.signing_key)
    )


def extract_access_token(response: Any) -> str:
    """
    Get the access token from a token endpoint response

    The token is at the top level in v2/v3 responses and under "data" in
    newer API versions.
    """
    token = None
    if isinstance(response, dict):
        token = response.get("access_token")
        if not token and isinstance(response.get("data"), dict):
            token = response["data"].get("access_token")

    if not token or not isinstance(token, str):
        raise MyInfoResponseFormatError("Missing access token in response.", MyInfoErrorCodes.MISSING_ACCESS_TOKEN)

    return token


class TokenExchangeClient:
    """Exchanges an authorization code for an access token"""

    def __init__(
        self,
        config: MyInfoConfig,
        token_path: str = "token",
        send_state: bool = True,
        logger: Optional[ClientLogger] = None,
    ):
        """
        Args:
            config: Client configuration
            token_path: Path of the token endpoint relative to the API base URL
            send_state: Whether the relay state is part of the token request
            logger: Optional logger
        """
        self.config = config
        self.token_url = f"{config.api_base_url}/{token_path}"
        self.send_state = send_state
        self.logger = logger or NullLogger()

    def build_body(self, auth_code: str, relay_state: Optional[str] = None) -> Dict[str, str]:
        body = {
            "grant_type": "authorization_code",
            "code": auth_code,
            "redirect_uri": self.config.redirect_endpoint,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }
        if self.send_state and relay_state is not None:
            body["state"] = relay_state
        return body

    async def exchange(self, auth_code: str, relay_state: Optional[str] = None) -> str:
        """
        Retrieve the access token from the token endpoint

        Args:
            auth_code: Authorization code provided to the redirect endpoint
            relay_state: State passed through the login

        Returns:
            The access token as a JWT

        Raises:
            MyInfoNetworkError: Connection failure, timeout or non-2xx response
                (code TOKEN_EXCHANGE_FAILED, underlying error in ``cause``)
            MyInfoResponseFormatError: Malformed JSON or missing access token
                (code TOKEN_EXCHANGE_FAILED, underlying error in ``cause``)
            MyInfoSigningError: The private key cannot sign
        """
        body = self.build_body(auth_code, relay_state)
        signed = await sign_in_executor("POST", self.token_url, body, self.config)
        headers = {
            "Content-Type": FORM_CONTENT_TYPE,
            "Cache-Control": "no-cache",
            "Authorization": signed.authorization_header(),
            "User-Agent": get_user_agent(self.config.hide_user_agent_version),
        }

        self.logger.debug("token_exchange_started", url=self.token_url, timestamp=signed.timestamp)

        try:
            response = await send_request(self.token_url, "POST", body, headers, self.config.timeout)
            token = extract_access_token(response)
        except MyInfoNetworkError as error:
            self.logger.error("token_exchange_failed", url=self.token_url, error=error.message, code=error.code)
            raise MyInfoNetworkError(
                f"Token exchange failed: {error.message}", MyInfoErrorCodes.TOKEN_EXCHANGE_FAILED, error, error.status
            ) from error
        except MyInfoResponseFormatError as error:
            self.logger.error("token_exchange_failed", url=self.token_url, error=error.message, code=error.code)
            raise MyInfoResponseFormatError(
                f"Token exchange failed: {error.message}", MyInfoErrorCodes.TOKEN_EXCHANGE_FAILED, error
            ) from error

        self.logger.info("token_exchange_succeeded", url=self.token_url)
        return token


class ResourceFetchClient:
    """Fetches a protected resource with a signed, bearer-authorized GET"""

    def __init__(self, config: MyInfoConfig, logger: Optional[ClientLogger] = None):
        self.config = config
        self.logger = logger or NullLogger()

    def build_params(self, requested_attributes, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        params = {
            "client_id": self.config.client_id,
            "attributes": join_attributes(requested_attributes),
        }
        params.update(extra or {})
        return params

    async def fetch(
        self,
        path: str,
        access_token: str,
        params: Mapping[str, Any],
        encrypted: Optional[bool] = None,
    ) -> Union[str, Any]:
        """
        GET a resource

        Args:
            path: Resource path relative to the API base URL, e.g. entity-person/UEN/UUID
            access_token: Access token from the token endpoint
            params: Query params, also covered by the signature
            encrypted: Whether the body is an envelope. Defaults to the config

        Returns:
            Raw body (compact JWE) for encrypted responses, else parsed JSON
        """
        if encrypted is None:
            encrypted = self.config.encrypted_responses

        url = f"{self.config.api_base_url}/{path}"
        # url has no querystring params appended when generating auth header
        signed = await sign_in_executor("GET", url, params, self.config)
        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Cache-Control": "no-cache",
            "Authorization": signed.authorization_header(bearer=access_token),
            "User-Agent": get_user_agent(self.config.hide_user_agent_version),
        }

        self.logger.debug("resource_fetch_started", url=url, encrypted=encrypted)

        try:
            return await send_request(
                f"{url}?{canonical_query_string(params)}",
                "GET",
                None,
                headers,
                self.config.timeout,
                parse_json=not encrypted,
            )
        except (MyInfoNetworkError, MyInfoResponseFormatError) as error:
            self.logger.error("resource_fetch_failed", url=url, error=error.message, code=error.code)
            raise
