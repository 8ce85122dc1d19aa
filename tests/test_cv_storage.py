"""Tests for the SQLAlchemy-backed CV storage (uses the api_db fixture)."""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from ojtech_resume.data.db import get_database_url, get_session
from ojtech_resume.data.models import CvRecord
from ojtech_resume.services.cv_errors import StorageError
from ojtech_resume.services.cv_storage import (
    SqlCvStorage,
    delete_cv_record,
    find_current_cv,
    get_cv_content,
    get_cv_record,
    list_cv_records,
    replace_cv_content,
)

pytestmark = pytest.mark.usefixtures("api_db")


def test_runs_against_temporary_database(tmp_path):
    assert get_database_url() == f"sqlite:///{(tmp_path / 'api.db').as_posix()}"


@pytest.fixture
def storage() -> SqlCvStorage:
    return SqlCvStorage()


class TestSqlCvStorage:
    def test_create_record(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))

        record = get_cv_record(record_id)
        assert record["owner"] == "jo"
        assert record["active"] is True
        assert record["generated"] is True
        assert record["has_content"] is False

    def test_new_record_deactivates_previous(self, storage):
        first = asyncio.run(storage.create_record("jo"))
        second = asyncio.run(storage.create_record("jo"))
        other = asyncio.run(storage.create_record("mia"))

        assert get_cv_record(first)["active"] is False
        assert get_cv_record(second)["active"] is True
        assert get_cv_record(other)["active"] is True

    def test_content_round_trip(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))

        asyncio.run(storage.put_content(record_id, '{"contactInfo": {}}'))

        assert asyncio.run(storage.get_content(record_id)) == '{"contactInfo": {}}'

    def test_put_content_clears_rendered_cache(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))
        asyncio.run(storage.put_rendered_html(record_id, "<html>old</html>"))

        asyncio.run(storage.put_content(record_id, "{}"))

        assert asyncio.run(storage.get_rendered_html(record_id)) is None

    def test_rendered_html_round_trip(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))

        asyncio.run(storage.put_rendered_html(record_id, "<html>cached</html>"))

        assert asyncio.run(storage.get_rendered_html(record_id)) == "<html>cached</html>"
        assert get_cv_record(record_id)["has_rendered_html"] is True

    @pytest.mark.parametrize("method", ["get_content", "get_rendered_html"])
    def test_unknown_record_is_404(self, storage, method):
        with pytest.raises(StorageError) as exc_info:
            asyncio.run(getattr(storage, method)("missing"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.is_retryable

    def test_database_errors_become_500(self, storage, monkeypatch: pytest.MonkeyPatch):
        def _broken(record_id):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr(SqlCvStorage, "_get_content", staticmethod(_broken))

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(storage.get_content("any"))

        assert exc_info.value.status_code == 500
        assert not exc_info.value.is_retryable


class TestRecordQueries:
    def test_get_missing_record(self):
        assert get_cv_record("missing") is None
        assert get_cv_content("missing") is None

    def test_list_is_scoped_to_owner(self, storage):
        asyncio.run(storage.create_record("jo"))
        asyncio.run(storage.create_record("jo"))
        asyncio.run(storage.create_record("mia"))

        records = list_cv_records("jo")
        assert len(records) == 2
        assert {r["owner"] for r in records} == {"jo"}

    def test_replace_content(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))
        asyncio.run(storage.put_rendered_html(record_id, "<html>old</html>"))

        assert replace_cv_content(record_id, "<html>mine</html>") is True

        record = get_cv_record(record_id)
        assert record["has_rendered_html"] is False
        assert record["generated"] is False
        assert get_cv_content(record_id) == "<html>mine</html>"

    def test_replace_missing_record(self):
        assert replace_cv_content("missing", "x") is False


class TestFindCurrentCv:
    def test_no_records(self):
        assert find_current_cv("nobody") is None

    def test_prefers_record_with_content(self, storage):
        with_content = asyncio.run(storage.create_record("jo"))
        asyncio.run(storage.put_content(with_content, "{}"))
        asyncio.run(storage.create_record("jo"))  # newer, active, empty

        assert find_current_cv("jo")["id"] == with_content

    def test_falls_back_to_active_record(self, storage):
        asyncio.run(storage.create_record("jo"))
        active = asyncio.run(storage.create_record("jo"))

        assert find_current_cv("jo")["id"] == active

    def test_falls_back_to_newest_record(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))
        with get_session() as session:
            session.get(CvRecord, record_id).active = False

        assert find_current_cv("jo")["id"] == record_id


class TestDeleteRecord:
    def test_delete(self, storage):
        record_id = asyncio.run(storage.create_record("jo"))

        assert delete_cv_record(record_id) is True
        assert get_cv_record(record_id) is None

    def test_delete_missing_record(self):
        assert delete_cv_record("missing") is False
