"""API key selection for the remote model.

The edit client only talks to the ``CredentialBroker`` protocol; the keychain
backed implementation below is what the desktop app wires in.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from typing import Protocol

import keyring
import keyring.errors

from .logger import get_logger

_logger = get_logger("credentials")

KEYCHAIN_SERVICE = "neural-enhance"
KEYCHAIN_USER = "gemini_api_key"
ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

KeyPrompt = Callable[[], "str | None"]


class CredentialBroker(Protocol):
    async def is_credential_selected(self) -> bool: ...

    async def request_credential_selection(self) -> None: ...

    def current_credential(self) -> str | None: ...


class KeyringCredentialBroker:
    """Resolve the Gemini API key from the environment or the OS keychain.

    ``prompt`` is called (off the event loop) when a new key must be chosen;
    it returns the key or None if the user declined.
    """

    def __init__(
        self,
        prompt: KeyPrompt | None = None,
        *,
        service: str = KEYCHAIN_SERVICE,
        user: str = KEYCHAIN_USER,
        env_vars: tuple[str, ...] = ENV_VARS,
    ) -> None:
        self._prompt = prompt
        self._service = service
        self._user = user
        self._env_vars = env_vars
        self._selected: str | None = None

    def _env_key(self) -> str | None:
        for name in self._env_vars:
            val = (os.getenv(name) or "").strip()
            if val:
                return val
        return None

    def _keychain_key(self) -> str | None:
        try:
            return keyring.get_password(self._service, self._user) or None
        except keyring.errors.KeyringError as e:
            _logger.debug("keychain read failed: %s", e)
            return None

    def current_credential(self) -> str | None:
        return self._selected or self._env_key() or self._keychain_key()

    async def is_credential_selected(self) -> bool:
        return bool(await asyncio.to_thread(self.current_credential))

    async def request_credential_selection(self) -> None:
        if self._prompt is None:
            _logger.warning("no key prompt available; set %s", " or ".join(self._env_vars))
            return
        key = await asyncio.to_thread(self._prompt)
        key = (key or "").strip()
        if not key:
            _logger.debug("key selection declined")
            return
        await asyncio.to_thread(self.store, key)

    def store(self, key: str) -> None:
        """Use ``key`` from now on and persist it to the keychain if possible."""
        self._selected = key
        try:
            keyring.set_password(self._service, self._user, key)
            _logger.info("api key stored in keychain")
        except keyring.errors.KeyringError as e:
            _logger.warning("keychain write failed, key kept for this session: %s", e)

    def forget(self) -> None:
        self._selected = None
        try:
            keyring.delete_password(self._service, self._user)
        except keyring.errors.PasswordDeleteError:
            pass
        except keyring.errors.KeyringError as e:
            _logger.warning("keychain delete failed: %s", e)
