"""Unit tests for the local filesystem storage backend."""

import pytest

from clausewise.exceptions import StorageError
from clausewise.services.storage.local_storage import LocalFileStorage


@pytest.fixture
def local_storage(tmp_path):
    return LocalFileStorage(str(tmp_path))


@pytest.mark.asyncio
async def test_save_creates_owner_prefix_and_reads_back(local_storage, tmp_path):
    await local_storage.save("user-1/123_nda.pdf", b"%PDF-1.7", "application/pdf")

    assert (tmp_path / "user-1" / "123_nda.pdf").exists()
    assert await local_storage.read("user-1/123_nda.pdf") == b"%PDF-1.7"


@pytest.mark.asyncio
async def test_delete_reports_whether_something_was_removed(local_storage):
    await local_storage.save("u/a.pdf", b"%PDF", "application/pdf")

    assert await local_storage.delete("u/a.pdf") is True
    assert await local_storage.delete("u/a.pdf") is False


@pytest.mark.asyncio
async def test_read_missing_raises_file_not_found(local_storage):
    with pytest.raises(FileNotFoundError):
        await local_storage.read("nobody/missing.pdf")


@pytest.mark.asyncio
async def test_paths_outside_root_are_rejected(local_storage):
    with pytest.raises(StorageError):
        await local_storage.save("../escape.pdf", b"%PDF", "application/pdf")
    with pytest.raises(StorageError):
        await local_storage.delete("../../etc/passwd")
