# tests/test_token_store.py

from __future__ import annotations

import json
import os
import stat
import sys

import pytest

from taskmaster_client.session.session_models import StoredTokens
from taskmaster_client.session.token_store import FileTokenStore


def test_missing_file_loads_nothing(tmp_path) -> None:
    assert FileTokenStore(tmp_path / "session.json").load() is None


def test_save_then_reload_from_disk(tmp_path) -> None:
    path = tmp_path / "nested" / "session.json"
    FileTokenStore(path).save(StoredTokens("acc", "ref"))

    assert json.loads(path.read_text("utf-8")) == {"accessToken": "acc", "refreshToken": "ref"}
    assert FileTokenStore(path).load() == StoredTokens("acc", "ref")


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_saved_file_is_private(tmp_path) -> None:
    path = tmp_path / "session.json"
    FileTokenStore(path).save(StoredTokens("acc"))

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_clear_removes_file(tmp_path) -> None:
    path = tmp_path / "session.json"
    store = FileTokenStore(path)
    store.save(StoredTokens("acc"))

    store.clear()
    store.clear()  # idempotent

    assert not path.exists()
    assert store.load() is None


@pytest.mark.parametrize("content", ["{not json", "[]", '{"accessToken": ""}'])
def test_unusable_file_is_ignored(tmp_path, content) -> None:
    path = tmp_path / "session.json"
    path.write_text(content, "utf-8")

    assert FileTokenStore(path).load() is None
