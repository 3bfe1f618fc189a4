"""表单字段验证测试"""

import pytest

from ycms.config import CmsSettings, configure_cms
from ycms.exceptions import ErrorCode, ValidationException
from ycms.validators import (
    FieldErrors,
    normalize_target,
    validate_direction,
    validate_language_code,
    validate_name,
    validate_target,
    validate_title,
)


class TestFieldErrors:

    def test_add_ignores_none_and_keeps_first(self):
        errors = FieldErrors()
        errors.add("name", None)
        errors.add("name", "Name is required")
        errors.add("name", "Name must be at least 2 characters")

        assert errors == {"name": "Name is required"}

    def test_raise_if_any(self):
        FieldErrors().raise_if_any()

        errors = FieldErrors()
        errors.add("slug", "Slug already exists")
        with pytest.raises(ValidationException) as exc_info:
            errors.raise_if_any(code=ErrorCode.INVALID_SLUG)

        assert exc_info.value.code == ErrorCode.INVALID_SLUG
        assert exc_info.value.field_errors == {"slug": "Slug already exists"}


class TestValidators:

    def test_name(self):
        assert validate_name("") == "Name is required"
        assert validate_name("   ") == "Name is required"
        assert validate_name("a") == "Name must be at least 2 characters"
        assert validate_name("ab") is None
        assert validate_name("a", min_length=1) is None
        assert validate_name(None, label="Menu name") == "Menu name is required"

    def test_name_min_length_from_settings(self):
        configure_cms(CmsSettings(min_name_length=4))
        assert validate_name("abc") == "Name must be at least 4 characters"

    def test_title(self):
        assert validate_title(" ") == "Title is required"
        assert validate_title("Home") is None

    def test_target(self):
        assert normalize_target(None) == "_self"
        assert normalize_target("_blank") == "_blank"
        assert validate_target("") is None
        assert validate_target("_top") is None
        assert validate_target("new") is not None

    @pytest.mark.parametrize("code", ["en", "fil", "pt-br"])
    def test_language_code_valid(self, code):
        assert validate_language_code(code) is None

    @pytest.mark.parametrize("code", ["", "e", "EN", "english", "en_us", "e1"])
    def test_language_code_invalid(self, code):
        assert validate_language_code(code) is not None

    @pytest.mark.parametrize("code", ["en\n", "fr\n", "pt\nbr"])
    def test_language_code_with_newline(self, code):
        assert validate_language_code(code) == "Invalid language code format"

    def test_direction(self):
        assert validate_direction("ltr") is None
        assert validate_direction("rtl") is None
        assert validate_direction("ttb") == "Direction must be ltr or rtl"
