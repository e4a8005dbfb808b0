"""Tests for file-backed credential persistence."""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path

import pytest

from tests.helpers import write_token_file
from xyzmcp.core.auth import (
    CredentialCorruptError,
    CredentialIOError,
    CredentialNotFoundError,
    CredentialStore,
    InvalidCredentialStateError,
)
from xyzmcp.models.credential import Credential


def _credential(**overrides: object) -> Credential:
    fields: dict[str, object] = {
        "access_token": "A1",
        "refresh_token": "R1",
        "uid": "u-1",
        "nickname": "listener",
        "last_refreshed_at": 1_750_000_000,
    }
    fields.update(overrides)
    return Credential(**fields)


# --- Round trip ---

@pytest.mark.parametrize("stamp", [0, 1_750_000_000])
def test_save_then_load_round_trips(token_path: Path, stamp: int) -> None:
    store = CredentialStore()
    original = _credential(last_refreshed_at=stamp, nickname="小宇宙")
    store.save(original, token_path)

    loaded = store.load(token_path)
    assert loaded.model_dump() == original.model_dump()


def test_save_writes_expected_json_fields(token_path: Path) -> None:
    CredentialStore().save(_credential(), token_path)
    payload = json.loads(token_path.read_text(encoding="utf-8"))
    assert payload == {
        "access_token": "A1",
        "refresh_token": "R1",
        "uid": "u-1",
        "nickname": "listener",
        "last_updated_timestamp": 1_750_000_000,
    }


def test_save_omits_zero_timestamp(token_path: Path) -> None:
    CredentialStore().save(_credential(last_refreshed_at=0), token_path)
    payload = json.loads(token_path.read_text(encoding="utf-8"))
    assert "last_updated_timestamp" not in payload


def test_source_path_is_not_serialized(token_path: Path) -> None:
    cred = _credential(source_path=Path("/elsewhere/token.json"))
    CredentialStore().save(cred, token_path)
    assert "source_path" not in json.loads(token_path.read_text(encoding="utf-8"))


# --- Save side effects ---

def test_save_creates_missing_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "c" / "token.json"
    CredentialStore().save(_credential(), target)
    assert target.exists()


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_save_makes_every_created_directory_owner_only(tmp_path: Path) -> None:
    old_umask = os.umask(0o022)
    try:
        CredentialStore().save(_credential(), tmp_path / ".mcp" / "xiaoyuzhoufm-mcp" / "token.json")
    finally:
        os.umask(old_umask)

    created = [tmp_path / ".mcp", tmp_path / ".mcp" / "xiaoyuzhoufm-mcp"]
    assert [oct(os.stat(d).st_mode)[-3:] for d in created] == ["700", "700"]


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_save_leaves_existing_parent_permissions_alone(tmp_path: Path) -> None:
    existing = tmp_path / "shared"
    existing.mkdir(mode=0o755)
    os.chmod(existing, 0o755)
    CredentialStore().save(_credential(), existing / "private" / "token.json")
    assert oct(os.stat(existing).st_mode)[-3:] == "755"
    assert oct(os.stat(existing / "private").st_mode)[-3:] == "700"


def test_save_updates_source_path(token_path: Path) -> None:
    cred = _credential()
    assert cred.source_path is None
    CredentialStore().save(cred, token_path)
    assert cred.source_path == token_path


def test_save_leaves_no_temp_files(token_path: Path) -> None:
    store = CredentialStore()
    store.save(_credential(), token_path)
    store.save(_credential(access_token="A9"), token_path)
    assert sorted(p.name for p in token_path.parent.iterdir()) == ["token.json"]


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_save_sets_owner_only_permissions(token_path: Path) -> None:
    CredentialStore().save(_credential(), token_path)
    assert oct(os.stat(token_path).st_mode)[-3:] == "600"
    assert oct(os.stat(token_path.parent).st_mode)[-3:] == "700"


def test_save_rejects_incomplete_credential(token_path: Path) -> None:
    with pytest.raises(InvalidCredentialStateError):
        CredentialStore().save(_credential(refresh_token=""), token_path)
    assert not token_path.exists()


def test_save_reports_write_failure_as_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(CredentialIOError):
        CredentialStore().save(_credential(), blocker / "token.json")


# --- Load failures ---

def test_load_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(CredentialNotFoundError):
        CredentialStore().load(tmp_path / "nope" / "token.json")


def test_load_access_token_only_is_corrupt(token_path: Path) -> None:
    write_token_file(token_path, refresh_token="")
    with pytest.raises(CredentialCorruptError):
        CredentialStore().load(token_path)


def test_load_empty_object_is_corrupt(token_path: Path) -> None:
    token_path.parent.mkdir(parents=True)
    token_path.write_text("{}", encoding="utf-8")
    with pytest.raises(CredentialCorruptError):
        CredentialStore().load(token_path)


@pytest.mark.parametrize("content", ["", "{not json", "[1, 2]", '"token"'])
def test_load_unparseable_content_is_corrupt(token_path: Path, content: str) -> None:
    token_path.parent.mkdir(parents=True)
    token_path.write_text(content, encoding="utf-8")
    with pytest.raises(CredentialCorruptError):
        CredentialStore().load(token_path)


def test_load_invalid_utf8_is_corrupt(token_path: Path) -> None:
    token_path.parent.mkdir(parents=True)
    token_path.write_bytes(b'{"access_token": "\xff\xfe", "refresh_token": "R"}')
    with pytest.raises(CredentialCorruptError, match="not valid UTF-8"):
        CredentialStore().load(token_path)


def test_load_wrong_field_types_is_corrupt(token_path: Path) -> None:
    write_token_file(token_path, last_updated_timestamp="yesterday")
    with pytest.raises(CredentialCorruptError):
        CredentialStore().load(token_path)


def test_load_directory_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(CredentialIOError):
        CredentialStore().load(tmp_path)


def test_load_sets_source_path(token_path: Path) -> None:
    write_token_file(token_path)
    assert CredentialStore().load(token_path).source_path == token_path
