"""
Unit Tests for the Service Base Layer.

FieldViolations aggregation and database error translation.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from studynotes.core.exceptions import ConflictError, DatabaseError, ValidationError
from studynotes.services.base import BaseService, FieldViolations


class TestFieldViolations:

    def test_collects_every_violation_before_raising(self):
        violations = FieldViolations()
        violations.check_length("title", "", min_length=1)
        violations.check_length("content", "x" * 11, max_length=10)

        with pytest.raises(ValidationError) as exc_info:
            violations.raise_if_any()

        assert exc_info.value.details == {
            "fields": [
                {"field": "title", "message": "This field is required"},
                {"field": "content", "message": "Maximum length is 10"},
            ]
        }

    def test_whitespace_only_is_missing(self):
        violations = FieldViolations()
        assert violations.check_required("name", "   ") is False
        assert violations

    def test_optional_none_passes(self):
        violations = FieldViolations()
        violations.check_length("description", None, max_length=10)
        assert not violations
        violations.raise_if_any()

    def test_length_is_measured_after_trimming(self):
        violations = FieldViolations()
        violations.check_length("name", "  ab  ", min_length=3)
        assert violations.fields == [{"field": "name", "message": "Minimum length is 3"}]

    def test_custom_message(self):
        violations = FieldViolations()
        violations.add("file", "File is empty")
        with pytest.raises(ValidationError, match="Upload rejected"):
            violations.raise_if_any("Upload rejected")


class TestExecuteDbOperation:

    @pytest.fixture
    def service(self, mock_db_session):
        return BaseService(mock_db_session)

    async def test_returns_result(self, service):
        async def op():
            return 42

        assert await service._execute_db_operation("answer", op()) == 42

    async def test_unique_violation_becomes_conflict(self, service):
        async def op():
            raise IntegrityError(
                "INSERT INTO subjects ...",
                {},
                Exception("UNIQUE constraint failed: subjects.name, subjects.user_id"),
            )

        with pytest.raises(ConflictError, match="A subject with this name already exists"):
            await service._execute_db_operation(
                "create_subject",
                op(),
                conflict_message="A subject with this name already exists",
            )

    async def test_other_integrity_error_becomes_database_error(self, service):
        async def op():
            raise IntegrityError("INSERT ...", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(DatabaseError):
            await service._execute_db_operation("create_note", op())

    async def test_driver_error_becomes_database_error(self, service):
        async def op():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        with pytest.raises(DatabaseError, match="delete_note"):
            await service._execute_db_operation("delete_note", op())
