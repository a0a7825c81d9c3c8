"""
Off-loop decryption and verification of MyInfo responses

RSA decryption and signature checks are CPU bound, so they run in the
default executor instead of blocking the event loop.
"""

import asyncio
import functools
from typing import Any, Dict, Optional

from .config import MyInfoConfig
from .envelope import decrypt_envelope
from .log import ClientLogger, NullLogger
from .verification import verify_token


class ResponseDecoder:
    """Decrypts envelopes and verifies tokens with the keys of one configuration"""

    def __init__(self, config: MyInfoConfig, logger: Optional[ClientLogger] = None):
        self.config = config
        self.logger = logger or NullLogger()

    async def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """Verified claims of a token issued by MyInfo, or None if it does not verify"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(
                verify_token,
                token,
                self.config.verification_key,
                verify_not_before=self.config.verify_not_before,
                clock_tolerance=self.config.clock_tolerance,
                logger=self.logger,
            ),
        )

    async def decrypt(self, envelope: str) -> str:
        """Inner signed token of an envelope; raises MyInfoDecryptionError"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, decrypt_envelope, envelope, self.config.signing_key)

    async def decode(self, envelope: str) -> Optional[Dict[str, Any]]:
        """Decrypt an envelope and verify the signed record inside it"""
        inner_token = await self.decrypt(envelope)
        claims = await self.verify(inner_token)
        if claims is None:
            self.logger.warning("record_verification_failed")
        return claims
