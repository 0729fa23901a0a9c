"""
Credential providers used by builders that need a secret (e.g. a signing passphrase).
"""

from __future__ import annotations

import getpass
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from releasesmith.exceptions import CredentialError
from releasesmith.log_utils import logger


class CredentialProvider(ABC):
    """Obtains secrets on behalf of builders."""

    @abstractmethod
    def get_secret(self, purpose: str) -> str:
        """
        Return the secret for `purpose`.

        Raises:
            CredentialError: If no secret can be obtained.
        """


class StaticCredentialProvider(CredentialProvider):
    """
    Headless provider backed by pre-supplied values.

    Asking for a purpose that was not supplied fails immediately instead of blocking.
    """

    def __init__(self, secrets: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._secrets: Dict[str, str] = {
            k: v for k, v in (secrets or {}).items() if v is not None
        }

    def get_secret(self, purpose: str) -> str:
        try:
            return self._secrets[purpose]
        except KeyError:
            raise CredentialError(
                f"No {purpose} secret was supplied and prompting is disabled",
                purpose=purpose,
            ) from None


class InteractiveCredentialProvider(CredentialProvider):
    """
    Provider that prompts on the terminal with masked input.

    Pre-supplied values in `fallback` are returned without prompting.
    """

    def __init__(self, fallback: Optional[StaticCredentialProvider] = None) -> None:
        self._fallback = fallback or StaticCredentialProvider()

    def get_secret(self, purpose: str) -> str:
        try:
            return self._fallback.get_secret(purpose)
        except CredentialError:
            pass

        logger.debug(f"Prompting for {purpose} secret")
        try:
            return getpass.getpass(f"Enter {purpose} password: ")
        except (EOFError, KeyboardInterrupt):
            raise CredentialError(
                f"No {purpose} secret entered", purpose=purpose
            ) from None
