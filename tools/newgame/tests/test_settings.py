from __future__ import annotations

import pytest

from tools.newgame.core.errors import ConfigurationError
from tools.newgame.core.settings import DEFAULT_TASM_REF, DEFAULT_TGO_REF, NewGameSettings


def test_defaults_for_module_refs(settings: NewGameSettings) -> None:
    assert settings.tasm_ref == DEFAULT_TASM_REF
    assert settings.tgo_ref == DEFAULT_TGO_REF
    assert settings.skip_create_stack is False
    assert settings.auto_start is False


def test_env_overrides(monkeypatch, required_env) -> None:
    monkeypatch.setenv("TASM_REF", "v9.9.9")
    monkeypatch.setenv("TGO_REF", "main")
    monkeypatch.setenv("SKIP_CREATE_STACK", "true")
    monkeypatch.setenv("AUTO_START_NEW_GAME", "true")

    settings = NewGameSettings(_env_file=None)

    assert settings.tasm_ref == "v9.9.9"
    assert settings.tgo_ref == "main"
    assert settings.skip_create_stack is True
    assert settings.auto_start is True


@pytest.mark.parametrize("value", ["1", "yes", "TRUE", ""])
def test_flags_require_exact_true(monkeypatch, required_env, value: str) -> None:
    monkeypatch.setenv("SKIP_CREATE_STACK", value)
    monkeypatch.setenv("AUTO_START_NEW_GAME", value)

    settings = NewGameSettings(_env_file=None)

    assert settings.skip_create_stack is False
    assert settings.auto_start is False


def test_require_credentials_lists_missing(monkeypatch, required_env) -> None:
    monkeypatch.delenv("TF_VAR_github_pat")
    monkeypatch.setenv("ARM_SUBSCRIPTION_ID", "")

    settings = NewGameSettings(_env_file=None)

    assert settings.missing_required() == ["TF_VAR_github_pat", "ARM_SUBSCRIPTION_ID"]
    with pytest.raises(ConfigurationError, match="TF_VAR_github_pat, ARM_SUBSCRIPTION_ID"):
        settings.require_credentials()


def test_require_credentials_passes(settings: NewGameSettings) -> None:
    settings.require_credentials()
    assert settings.github_org == "acme-games"
