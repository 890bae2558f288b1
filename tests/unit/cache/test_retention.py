"""
Strata Cache - Retention Policy Tests
"""

from pathlib import Path

from strata.cache.retention import AbsoluteExpiry, CacheEntry, FileDependency, file_signature


class TestAbsoluteExpiry:
    def test_live_until_expiry(self) -> None:
        policy = AbsoluteExpiry(expires_at=100.0)

        assert policy.is_live(99.9) is True
        assert policy.is_live(100.0) is False

    def test_entry_delegates_to_policy(self) -> None:
        entry = CacheEntry(key="k", value="v", retention=AbsoluteExpiry(100.0))

        assert entry.is_live(50.0) is True
        assert entry.is_live(150.0) is False
        assert entry.expires_at == 100.0
        assert entry.created_at.tzinfo is not None


class TestFileDependency:
    def test_signature_of_missing_file(self, tmp_path: Path) -> None:
        assert file_signature(str(tmp_path / "missing")) is None

    def test_signature_of_directory(self, tmp_path: Path) -> None:
        assert file_signature(str(tmp_path)) is None

    def test_live_until_rewritten(self, tmp_path: Path) -> None:
        path = tmp_path / "dep.txt"
        path.write_text("one")
        signature = file_signature(str(path))
        assert signature is not None
        policy = FileDependency(str(path), signature)

        assert policy.is_live() is True

        path.write_text("three")
        assert policy.is_live() is False

    def test_dead_after_replace_with_new_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dep.txt"
        path.write_text("one")
        signature = file_signature(str(path))
        assert signature is not None
        entry = CacheEntry(key="k", value="v", retention=FileDependency(str(path), signature))

        path.unlink()
        assert entry.is_live(0.0) is False
