import json

from app.services.credential_service import CredentialHolder


def test_blank_key_is_not_stored(tmp_path):
    holder = CredentialHolder(tmp_path / "creds.json")
    assert holder.set("   ") is False
    assert holder.set("") is False
    assert not holder.is_set()
    assert not (tmp_path / "creds.json").exists()


def test_key_survives_reload(tmp_path):
    path = tmp_path / "nested" / "creds.json"
    CredentialHolder(path).set("sk-abc")

    reloaded = CredentialHolder(path)
    assert not reloaded.is_set()
    reloaded.load()
    assert reloaded.is_set()
    assert reloaded.get() == "sk-abc"


def test_clear_removes_only_its_own_slot(tmp_path):
    path = tmp_path / "creds.json"
    path.write_text(json.dumps({"other": "keep-me"}), encoding="utf-8")
    holder = CredentialHolder(path, key_name="openai_api_key")
    holder.set("sk-abc")

    holder.clear()

    assert not holder.is_set()
    assert json.loads(path.read_text(encoding="utf-8")) == {"other": "keep-me"}


def test_unreadable_store_loads_as_empty(tmp_path):
    path = tmp_path / "creds.json"
    path.write_text("{not json", encoding="utf-8")
    holder = CredentialHolder(path)
    holder.load()
    assert not holder.is_set()


def test_memory_only_without_path():
    holder = CredentialHolder(None)
    assert holder.set("sk-abc")
    assert holder.get() == "sk-abc"
    holder.clear()
    assert holder.get() is None
