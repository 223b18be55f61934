"""Tests for session token persistence."""

from __future__ import annotations

import json
import stat

from storefront.services.token_store import FileTokenStore, MemoryTokenStore


class TestMemoryTokenStore:
    def test_save_get_clear(self):
        store = MemoryTokenStore()
        assert store.get() is None
        assert store.has_token() is False
        store.save("tok_1")
        assert store.get() == "tok_1"
        assert store.has_token() is True
        store.clear()
        assert store.get() is None

    def test_initial_token(self):
        assert MemoryTokenStore(token="tok").get() == "tok"


class TestFileTokenStore:
    def test_round_trip_under_fixed_key(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        store = FileTokenStore(path=path, key="auth_token")
        store.save("tok_abc")

        assert json.loads(path.read_text()) == {"auth_token": "tok_abc"}
        assert FileTokenStore(path=path, key="auth_token").get() == "tok_abc"

    def test_clear_keeps_other_keys(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"auth_token": "tok", "theme": "dark"}))
        store = FileTokenStore(path=path, key="auth_token")
        store.clear()
        assert json.loads(path.read_text()) == {"theme": "dark"}

    def test_missing_file(self, tmp_path):
        store = FileTokenStore(path=tmp_path / "absent.json")
        assert store.get() is None
        store.clear()
        assert not (tmp_path / "absent.json").exists()

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert FileTokenStore(path=path).get() is None

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{}")
        path.chmod(0o644)
        FileTokenStore(path=path).save("tok_secret")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

        fresh = tmp_path / "fresh" / "session.json"
        FileTokenStore(path=fresh).save("tok_secret")
        assert stat.S_IMODE(fresh.stat().st_mode) == 0o600
