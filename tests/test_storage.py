import io

import pytest

from core.errors import PersistenceError
from core.storage import MediaStorage, normalize_filename


class _FailingUpload:
    """Yields one chunk, then fails like a dropped connection or a full disk."""

    def __init__(self):
        self.calls = 0

    def read(self, size=-1):
        self.calls += 1
        if self.calls == 1:
            return b"partial-bytes"
        raise OSError(28, "No space left on device")


class TestMediaStorage:

    def test_save_and_delete(self, tmp_path):
        storage = MediaStorage(str(tmp_path))
        stored = storage.save("p1", "notes.txt", io.BytesIO(b"hello"))
        assert stored.key == "projects/p1/notes.txt"
        assert stored.size_bytes == 5
        assert storage.delete(stored.key) is True
        assert storage.delete(stored.key) is False

    def test_duplicate_key(self, tmp_path):
        storage = MediaStorage(str(tmp_path))
        storage.save("p1", "a.txt", io.BytesIO(b"1"))
        with pytest.raises(FileExistsError):
            storage.save("p1", "a.txt", io.BytesIO(b"2"))

    def test_failed_write_can_be_retried(self, tmp_path):
        storage = MediaStorage(str(tmp_path))
        with pytest.raises(PersistenceError):
            storage.save("p1", "site.txt", _FailingUpload())
        assert not (tmp_path / "projects" / "p1" / "site.txt").exists()

        stored = storage.save("p1", "site.txt", io.BytesIO(b"complete"))
        assert stored.size_bytes == len(b"complete")

    def test_url_round_trip(self, tmp_path):
        storage = MediaStorage(str(tmp_path))
        url = storage.url_for("http://testserver/", "projects/p1/a.png")
        assert url == "http://testserver/media/projects/p1/a.png"
        assert storage.key_from_url(url) == "projects/p1/a.png"
        assert storage.key_from_url("https://elsewhere.example/a.png") is None

    def test_normalize_filename(self):
        assert normalize_filename("../../etc/My Photo.JPG") == "My_Photo.JPG"
        assert normalize_filename("") == "file"
