"""
Unit Tests for Upload Validation.

Size and type rules applied before any byte reaches the disk.
Limits come from config/settings/storage.yaml (10 MiB).
"""

import pytest

from studynotes.core.exceptions import ValidationError
from studynotes.services.attachment import validate_upload

MIB = 1024 * 1024


class TestValidateUpload:

    @pytest.mark.parametrize(
        ("name", "mime"),
        [
            ("slides.pdf", "application/pdf"),
            ("photo.JPG", "image/jpeg"),
            ("diagram.png", "image/png"),
            ("essay.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
            ("essay.doc", "application/msword"),
            ("notes.txt", "text/plain"),
            ("archive.zip", "application/x-zip-compressed"),
        ],
    )
    def test_allowed_types(self, name, mime):
        assert validate_upload(name, mime, 1024) == mime

    def test_mime_parameters_are_ignored(self):
        assert validate_upload("notes.txt", "Text/Plain; charset=utf-8", 10) == "text/plain"

    def test_exactly_the_limit_is_accepted(self):
        assert validate_upload("slides.pdf", "application/pdf", 10 * MIB) == "application/pdf"

    def test_over_the_limit_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_upload("slides.pdf", "application/pdf", 11 * MIB)

        messages = [f["message"] for f in exc_info.value.details["fields"]]
        assert messages == ["File exceeds the 10 MiB limit"]

    def test_empty_file_is_rejected(self):
        with pytest.raises(ValidationError, match="Upload rejected"):
            validate_upload("notes.txt", "text/plain", 0)

    @pytest.mark.parametrize(
        ("name", "mime"),
        [
            ("virus.exe", "application/octet-stream"),
            ("script.sh", "text/plain"),
            ("slides.pdf", "application/x-msdownload"),
            ("no-extension", "application/pdf"),
            ("", ""),
        ],
    )
    def test_disallowed_types(self, name, mime):
        with pytest.raises(ValidationError):
            validate_upload(name, mime, 10)

    def test_reports_size_and_type_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_upload("virus.exe", "application/octet-stream", 11 * MIB)

        assert len(exc_info.value.details["fields"]) == 2
