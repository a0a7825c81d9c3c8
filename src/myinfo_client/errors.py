"""
MyInfo Client Error Classes
Provides specific error types with error codes for better error handling
"""

from typing import Optional


class MyInfoError(Exception):
    """Base MyInfo client error"""

    def __init__(self, message: str, code: str = "MYINFO_UNKNOWN_ERROR", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause


class MyInfoConfigurationError(MyInfoError):
    """Missing or invalid client configuration"""

    def __init__(self, message: str, code: str = "MYINFO_CONFIG_ERROR", cause: Optional[BaseException] = None):
        super().__init__(message, code, cause)


class MyInfoSigningError(MyInfoError):
    """Request signing failed, usually because the private key is unusable"""

    def __init__(self, message: str, code: str = "MYINFO_SIGNING_FAILED", cause: Optional[BaseException] = None):
        super().__init__(message, code, cause)


class MyInfoNetworkError(MyInfoError):
    """Network/Communication Error (connection failure, timeout or non-2xx status)"""

    def __init__(
        self,
        message: str,
        code: str = "MYINFO_NETWORK_ERROR",
        cause: Optional[BaseException] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, code, cause)
        self.status = status


class MyInfoResponseFormatError(MyInfoError):
    """Response body could not be parsed or lacks an expected field"""

    def __init__(self, message: str, code: str = "MYINFO_RESPONSE_FORMAT_ERROR", cause: Optional[BaseException] = None):
        super().__init__(message, code, cause)


class MyInfoDecryptionError(MyInfoError):
    """Malformed envelope or failed authenticated decryption"""

    def __init__(self, message: str, code: str = "MYINFO_DECRYPTION_FAILED", cause: Optional[BaseException] = None):
        super().__init__(message, code, cause)


class MyInfoVerificationError(MyInfoError):
    """Token could not be verified where a verified token is mandatory"""

    def __init__(self, message: str, code: str = "MYINFO_VERIFICATION_FAILED", cause: Optional[BaseException] = None):
        super().__init__(message, code, cause)


class MyInfoErrorCodes:
    """
    Error Codes Enum

    Use these codes to handle specific error types in your application:

    Example:
        try:
            token = await client.get_access_token(code)
        except MyInfoError as error:
            if error.code == MyInfoErrorCodes.TOKEN_EXCHANGE_FAILED:
                print('Login could not be completed, please try again')
    """

    # Configuration Errors
    CONFIG_REQUIRED = "MYINFO_CONFIG_REQUIRED"
    INVALID_KEY_DATA = "MYINFO_INVALID_KEY_DATA"
    UNSUPPORTED_KEY_TYPE = "MYINFO_UNSUPPORTED_KEY_TYPE"
    UNSUPPORTED_VARIANT = "MYINFO_UNSUPPORTED_VARIANT"
    INVALID_CONFIG = "MYINFO_INVALID_CONFIG"

    # Signing Errors
    NO_PRIVATE_KEY = "MYINFO_NO_PRIVATE_KEY"
    SIGNING_FAILED = "MYINFO_SIGNING_FAILED"

    # Network Errors
    HTTP_ERROR = "MYINFO_HTTP_ERROR"
    NETWORK_TIMEOUT = "MYINFO_NETWORK_TIMEOUT"
    CONNECTION_FAILED = "MYINFO_CONNECTION_FAILED"
    TOKEN_EXCHANGE_FAILED = "MYINFO_TOKEN_EXCHANGE_FAILED"

    # Response Format Errors
    INVALID_JSON = "MYINFO_INVALID_JSON"
    MISSING_ACCESS_TOKEN = "MYINFO_MISSING_ACCESS_TOKEN"
    INVALID_ENCODING = "MYINFO_INVALID_ENCODING"

    # Decryption Errors
    INVALID_ENVELOPE = "MYINFO_INVALID_ENVELOPE"
    DECRYPTION_FAILED = "MYINFO_DECRYPTION_FAILED"

    # Verification Errors
    SUBJECT_UNRESOLVABLE = "MYINFO_SUBJECT_UNRESOLVABLE"
