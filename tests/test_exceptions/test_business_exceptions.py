"""业务异常测试"""

from ycms.exceptions import (
    BusinessException,
    Err,
    ErrorCode,
    LanguageException,
    ResourceConflictException,
    ResourceNotFoundException,
    ServiceUnavailableException,
    ValidationException,
)


class TestErr:
    """Err 快捷方法测试"""

    def test_status_codes(self):
        assert isinstance(Err.not_found("x"), ResourceNotFoundException)
        assert Err.not_found("x").status_code == 404
        assert Err.conflict("x").status_code == 409
        assert Err.invalid("x").status_code == 422
        assert Err.unavailable("x").status_code == 503
        assert Err.fail("x").status_code == 400

    def test_default_codes(self):
        assert Err.not_found("x").code == ErrorCode.RESOURCE_NOT_FOUND
        assert Err.conflict("x").code == ErrorCode.RESOURCE_CONFLICT
        assert Err.invalid("x").code == ErrorCode.VALIDATION_ERROR
        assert Err.fail("x").code == ErrorCode.BUSINESS_ERROR

    def test_language_status_depends_on_code(self):
        assert Err.language("x").status_code == 404
        assert Err.language("x", code=ErrorCode.LANGUAGE_INACTIVE).status_code == 400
        assert isinstance(Err.language("x"), LanguageException)

    def test_error_code_is_str(self):
        assert ErrorCode.SLUG_EXISTS == "SLUG_EXISTS"


class TestFieldErrors:
    """字段错误测试"""

    def test_conflict_field_errors_in_details(self):
        exc = Err.conflict(
            "Slug already exists",
            code=ErrorCode.SLUG_EXISTS,
            field_errors={"slug": "Slug already exists"},
        )

        assert isinstance(exc, ResourceConflictException)
        assert exc.field_errors == {"slug": "Slug already exists"}
        assert exc.details == ["slug: Slug already exists"]

    def test_explicit_details_kept(self):
        exc = ValidationException("bad", details=["第一项"], field_errors={"name": "Name is required"})
        assert exc.details == ["第一项"]

    def test_to_dict(self):
        exc = Err.invalid(
            "数据验证失败",
            field_errors={"name": "Name is required"},
            operation="create_tag",
        )

        data = exc.to_dict()

        assert data["status_code"] == 422
        assert data["field_errors"] == {"name": "Name is required"}
        assert data["extra"] == {"operation": "create_tag"}

    def test_to_dict_returns_copies(self):
        exc = Err.not_found("Page not found", resource_type="page", resource_id=3)

        data = exc.to_dict()
        data["extra"]["resource_id"] = 99

        assert exc.extra["resource_id"] == 3


class TestBusinessException:

    def test_message_and_repr(self):
        exc = ServiceUnavailableException("数据库操作失败", code=ErrorCode.DATABASE_ERROR)

        assert exc.message == "数据库操作失败"
        assert str(exc) == "数据库操作失败"
        assert "DATABASE_ERROR" in repr(exc)
        assert isinstance(exc, BusinessException)
