"""Settings 테스트"""

import pytest

from npc_voice.config import DEFAULT_SCRIPT_PATH, Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("PLACEHOLDER_FALLBACK", "RECENT_LINE_MEMORY", "RANDOM_SEED", "VOICE_SCRIPT_PATH"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)
    assert s.PLACEHOLDER_FALLBACK == "token"
    assert s.RECENT_LINE_MEMORY == 3
    assert s.RANDOM_SEED is None
    assert s.VOICE_SCRIPT_PATH == str(DEFAULT_SCRIPT_PATH)
    assert DEFAULT_SCRIPT_PATH.exists()


def test_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLACEHOLDER_FALLBACK", "bracket")
    monkeypatch.setenv("RANDOM_SEED", "7")
    s = Settings(_env_file=None)
    assert s.PLACEHOLDER_FALLBACK == "bracket"
    assert s.RANDOM_SEED == 7


def test_invalid_fallback_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLACEHOLDER_FALLBACK", "empty")
    with pytest.raises(ValueError):
        Settings(_env_file=None)
