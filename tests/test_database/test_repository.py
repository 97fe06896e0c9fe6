"""
Tests for the document repository.

Tests upserts, the known-files snapshot, removals and folder bookkeeping.
All tests run against the temporary `store` database.
"""

import pytest

from pdffinder.core.exceptions import DatabaseError
from pdffinder.database.repository import Document, DocumentRepository


FOLDER = "/docs"


def make_document(path: str, content: str = "some content", **kwargs) -> Document:
    values = dict(
        path=path,
        title=path.rsplit("/", 1)[-1].rsplit(".", 1)[0],
        content=content,
        size=1000,
        modified=1700000000,
        pages=1,
    )
    values.update(kwargs)
    return Document(**values)


def search_count(repository: DocumentRepository, query: str) -> int:
    with repository.manager.connection() as conn:
        return conn.execute(
            "SELECT COUNT(*) FROM pdfs_fts WHERE pdfs_fts MATCH ?", (query,)
        ).fetchone()[0]


class TestInsert:
    """Tests for single and batch upserts."""

    def test_insert_document(self, repository: DocumentRepository):
        """Test inserting a single document."""
        doc_id = repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)

        assert doc_id is not None
        assert repository.count() == 1

    def test_insert_sets_folder(self, repository: DocumentRepository):
        """Test that the owning folder is stored."""
        repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)

        stored = repository.get_by_path("/docs/a.pdf")

        assert stored.folder_path == FOLDER
        assert stored.title == "a"
        assert stored.pages == 1

    def test_reinsert_keeps_one_row_and_id(self, repository: DocumentRepository):
        """Test that re-indexing a path updates in place."""
        first_id = repository.insert_or_replace(
            make_document("/docs/a.pdf", "aviation"), FOLDER
        )
        second_id = repository.insert_or_replace(
            make_document("/docs/a.pdf", "maritime", size=2000), FOLDER
        )

        assert first_id == second_id
        assert repository.count() == 1
        assert repository.get_by_path("/docs/a.pdf").size == 2000

    def test_reinsert_refreshes_full_text_index(self, repository: DocumentRepository):
        """Test that replaced content no longer matches."""
        repository.insert_or_replace(make_document("/docs/a.pdf", "aviation"), FOLDER)
        repository.insert_or_replace(make_document("/docs/a.pdf", "maritime"), FOLDER)

        assert search_count(repository, "aviation") == 0
        assert search_count(repository, "maritime") == 1

    def test_insert_batch(self, repository: DocumentRepository):
        """Test inserting several documents at once."""
        docs = [make_document(f"/docs/{i}.pdf") for i in range(5)]

        written = repository.insert_batch(docs, FOLDER)

        assert written == 5
        assert repository.count() == 5

    def test_insert_empty_batch(self, repository: DocumentRepository):
        """Test that an empty batch is a no-op."""
        assert repository.insert_batch([], FOLDER) == 0
        assert repository.count() == 0

    def test_failed_batch_is_rolled_back(self, repository: DocumentRepository):
        """Test that a failing row leaves no partial batch behind."""
        docs = [
            make_document("/docs/good.pdf"),
            make_document("/docs/bad.pdf", title=None),
        ]

        with pytest.raises(DatabaseError):
            repository.insert_batch(docs, FOLDER)

        assert repository.count() == 0

    def test_reinsert_keeps_first_owner(self, repository: DocumentRepository):
        """Test that another tracked folder re-indexing a path does not take it over."""
        repository.insert_or_replace(make_document("/docs/inner/b.pdf", "v1"), "/docs/inner")

        doc = make_document("/docs/inner/b.pdf", "v2")
        repository.insert_or_replace(doc, FOLDER)
        repository.insert_batch([make_document("/docs/inner/b.pdf", "v3")], FOLDER)

        stored = repository.get_by_path("/docs/inner/b.pdf")
        assert doc.folder_path == "/docs/inner"
        assert stored.folder_path == "/docs/inner"
        assert stored.content == "v3"


class TestKnownFiles:
    """Tests for the incremental snapshot."""

    def test_known_files_for_folder(self, repository: DocumentRepository):
        """Test that the snapshot maps path to (modified, size)."""
        repository.insert_or_replace(
            make_document("/docs/a.pdf", modified=111, size=222), FOLDER
        )
        repository.insert_or_replace(make_document("/other/b.pdf"), "/other")

        known = repository.get_known_files(FOLDER)

        assert known == {"/docs/a.pdf": (111, 222)}

    def test_known_files_empty_folder(self, repository: DocumentRepository):
        """Test an unknown folder has no known files."""
        assert repository.get_known_files("/nowhere") == {}

    def test_known_files_include_nested_folder_documents(self, repository: DocumentRepository):
        """Test that paths inside the folder are known whichever folder owns them."""
        repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)
        repository.insert_or_replace(make_document("/docs/inner/b.pdf"), "/docs/inner")

        assert set(repository.get_known_files(FOLDER)) == {"/docs/a.pdf", "/docs/inner/b.pdf"}
        assert set(repository.get_known_files("/docs/inner")) == {"/docs/inner/b.pdf"}

    def test_known_files_ignore_sibling_with_shared_prefix(self, repository: DocumentRepository):
        """Test that /docs does not claim files of /docs2."""
        repository.insert_or_replace(make_document("/docs2/a.pdf"), "/docs2")

        assert repository.get_known_files(FOLDER) == {}


class TestRemoval:
    """Tests for removing documents and folders."""

    def test_remove_by_path(self, repository: DocumentRepository):
        """Test removing one document."""
        repository.insert_or_replace(make_document("/docs/a.pdf", "aviation"), FOLDER)

        removed = repository.remove_by_path("/docs/a.pdf")

        assert removed == 1
        assert repository.get_by_path("/docs/a.pdf") is None
        assert search_count(repository, "aviation") == 0

    def test_remove_missing_path(self, repository: DocumentRepository):
        """Test that removing an unknown path deletes nothing."""
        assert repository.remove_by_path("/docs/missing.pdf") == 0

    def test_remove_pdfs_for_folder_keeps_record(self, repository: DocumentRepository):
        """Test that folder documents go while the folder record stays."""
        repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)
        repository.record_folder_indexed(FOLDER, 100)

        assert repository.remove_pdfs_for_folder(FOLDER) == 1
        assert [f.path for f in repository.list_indexed_folders()] == [FOLDER]

    def test_remove_folder(self, repository: DocumentRepository):
        """Test that removing a folder drops its documents and record only."""
        repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)
        repository.insert_or_replace(make_document("/docs/b.pdf"), FOLDER)
        repository.insert_or_replace(make_document("/other/c.pdf"), "/other")
        repository.record_folder_indexed(FOLDER, 100)
        repository.record_folder_indexed("/other", 100)

        deleted = repository.remove_folder(FOLDER)

        assert deleted == 2
        assert repository.count() == 1
        assert [f.path for f in repository.list_indexed_folders()] == ["/other"]

    def test_clear_all(self, repository: DocumentRepository):
        """Test that clearing removes every document and folder."""
        repository.insert_or_replace(make_document("/docs/a.pdf", "aviation"), FOLDER)
        repository.record_folder_indexed(FOLDER)

        repository.clear_all()

        assert repository.count() == 0
        assert repository.list_indexed_folders() == []
        assert search_count(repository, "aviation") == 0


class TestIndexedFolders:
    """Tests for folder bookkeeping."""

    def test_record_and_list(self, repository: DocumentRepository):
        """Test that a recorded folder is listed with its count."""
        repository.insert_or_replace(make_document("/docs/a.pdf"), FOLDER)
        repository.insert_or_replace(make_document("/docs/b.pdf"), FOLDER)
        repository.record_folder_indexed(FOLDER, 1700000000)

        folders = repository.list_indexed_folders()

        assert len(folders) == 1
        assert folders[0].path == FOLDER
        assert folders[0].last_indexed == 1700000000
        assert folders[0].pdf_count == 2

    def test_folder_without_documents_has_zero_count(self, repository: DocumentRepository):
        """Test a folder with no PDFs is still listed."""
        repository.record_folder_indexed("/empty", 5)

        assert repository.list_indexed_folders()[0].pdf_count == 0

    def test_most_recent_first(self, repository: DocumentRepository):
        """Test folders are ordered by last indexing time, newest first."""
        repository.record_folder_indexed("/old", 100)
        repository.record_folder_indexed("/new", 300)
        repository.record_folder_indexed("/middle", 200)

        paths = [f.path for f in repository.list_indexed_folders()]

        assert paths == ["/new", "/middle", "/old"]

    def test_record_updates_timestamp(self, repository: DocumentRepository):
        """Test that re-recording a folder replaces its timestamp."""
        repository.record_folder_indexed(FOLDER, 100)
        repository.record_folder_indexed(FOLDER, 200)

        folders = repository.list_indexed_folders()

        assert len(folders) == 1
        assert folders[0].last_indexed == 200
