from __future__ import annotations

import asyncio

from neural_enhance.credentials import KEYCHAIN_SERVICE, KEYCHAIN_USER, KeyringCredentialBroker


def test_no_key_anywhere(memory_keyring):
    broker = KeyringCredentialBroker()
    assert broker.current_credential() is None
    assert asyncio.run(broker.is_credential_selected()) is False


def test_environment_key_is_used(memory_keyring, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "  from-env  ")
    broker = KeyringCredentialBroker()
    assert broker.current_credential() == "from-env"
    assert asyncio.run(broker.is_credential_selected()) is True


def test_gemini_env_var_wins_over_google(memory_keyring, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "gemini")
    monkeypatch.setenv("GOOGLE_API_KEY", "google")
    assert KeyringCredentialBroker().current_credential() == "gemini"


def test_environment_wins_over_keychain(memory_keyring, monkeypatch):
    memory_keyring.passwords[(KEYCHAIN_SERVICE, KEYCHAIN_USER)] = "stored"
    assert KeyringCredentialBroker().current_credential() == "stored"
    monkeypatch.setenv("GEMINI_API_KEY", "env")
    assert KeyringCredentialBroker().current_credential() == "env"


def test_prompt_stores_key_in_keychain(memory_keyring):
    prompts = []

    def prompt():
        prompts.append(1)
        return " typed-key "

    broker = KeyringCredentialBroker(prompt)
    asyncio.run(broker.request_credential_selection())

    assert prompts == [1]
    assert broker.current_credential() == "typed-key"
    assert memory_keyring.passwords[(KEYCHAIN_SERVICE, KEYCHAIN_USER)] == "typed-key"


def test_declined_prompt_changes_nothing(memory_keyring):
    broker = KeyringCredentialBroker(lambda: None)
    asyncio.run(broker.request_credential_selection())
    assert broker.current_credential() is None
    assert memory_keyring.passwords == {}


def test_no_prompt_is_a_noop(memory_keyring):
    broker = KeyringCredentialBroker()
    asyncio.run(broker.request_credential_selection())
    assert broker.current_credential() is None


def test_forget_clears_selected_and_stored_key(memory_keyring):
    broker = KeyringCredentialBroker()
    broker.store("abc")
    assert broker.current_credential() == "abc"

    broker.forget()
    assert broker.current_credential() is None
    assert memory_keyring.passwords == {}

    # forgetting twice is harmless
    broker.forget()
