from __future__ import annotations

from pathlib import Path

from config import DEFAULT_MODEL, JsonConfigStore, RecognizerConfig
from interfaces import ConfigStore


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    assert store.get_api_key() == ""
    assert store.get_model() == DEFAULT_MODEL

    store.set_api_key("abc")
    store.set_model("qwen-vl-plus")
    store.set_camera_index(1)

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_api_key() == "abc"
    assert reloaded.get_model() == "qwen-vl-plus"
    assert reloaded.get_camera_index() == 1


def test_config_invalid_json_fallback(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.delenv("CAMERA_INDEX", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_model() == DEFAULT_MODEL
    assert store.get_camera_index() is None


def test_camera_index_from_environment(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setenv("CAMERA_INDEX", "3")

    store = JsonConfigStore(path=tmp_path / "config.json")
    assert store.get_camera_index() == 3


def test_recognizer_config_prefers_stored_key(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setenv("DASHSCOPE_API_KEY", "env-key")
    store = JsonConfigStore(path=tmp_path / "config.json")

    assert store.load_recognizer_config() == RecognizerConfig(api_key="env-key")

    store.set_api_key("stored-key")
    config = store.load_recognizer_config()
    assert config.api_key == "stored-key"
    assert config.temperature == 0.1


def test_non_object_json_and_mistyped_values_fall_back(tmp_path: Path, monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.delenv("CAMERA_INDEX", raising=False)
    path = tmp_path / "config.json"

    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_camera_index() is None

    path.write_text('{"api_key": 42, "model": "", "camera_index": true}', encoding="utf-8")
    assert store.get_api_key() == ""
    assert store.get_model() == DEFAULT_MODEL
    assert store.get_camera_index() is None


def test_set_keeps_other_settings(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    store.set_model("qwen-vl-plus")
    store.set_api_key("  key-with-spaces  ")

    assert store.get_model() == "qwen-vl-plus"
    assert store.get_api_key() == "key-with-spaces"
    assert not path.with_suffix(".tmp").exists()


def test_json_store_satisfies_config_store_protocol(tmp_path: Path) -> None:
    store = JsonConfigStore(path=tmp_path / "config.json")

    assert isinstance(store, ConfigStore)
