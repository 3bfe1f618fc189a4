"""业务异常类定义

定义内容管理引擎使用的业务异常类体系。
"""

import copy
from typing import Optional, List, Any, Dict, Union
from fastapi import status
from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举

    继承自 str，可以直接作为字符串使用。

    使用示例:
        from ycms.exceptions import Err, ErrorCode

        raise Err.conflict("Slug already exists", code=ErrorCode.SLUG_EXISTS)

        if exc.code == ErrorCode.LANGUAGE_NOT_FOUND:
            ...
    """

    # ==================== 通用错误 ====================
    BUSINESS_ERROR = "BUSINESS_ERROR"
    OPERATION_FAILED = "OPERATION_FAILED"

    # ==================== 资源相关 (404) ====================
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    TAG_NOT_FOUND = "TAG_NOT_FOUND"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    MENU_NOT_FOUND = "MENU_NOT_FOUND"
    MENU_ITEM_NOT_FOUND = "MENU_ITEM_NOT_FOUND"

    # ==================== 冲突相关 (409) ====================
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    SLUG_EXISTS = "SLUG_EXISTS"
    TRANSLATION_EXISTS = "TRANSLATION_EXISTS"
    LANGUAGE_CODE_EXISTS = "LANGUAGE_CODE_EXISTS"

    # ==================== 验证相关 (422) ====================
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SLUG = "INVALID_SLUG"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"
    WRONG_COLLECTION = "WRONG_COLLECTION"

    # ==================== 语言相关 ====================
    LANGUAGE_NOT_FOUND = "LANGUAGE_NOT_FOUND"
    LANGUAGE_INACTIVE = "LANGUAGE_INACTIVE"
    DEFAULT_LANGUAGE_PROTECTED = "DEFAULT_LANGUAGE_PROTECTED"
    LANGUAGE_IN_USE = "LANGUAGE_IN_USE"

    # ==================== 服务相关 (503) ====================
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]


class BusinessException(Exception):
    """业务异常基类

    所有业务异常都应该继承此类。

    属性:
        message: 错误消息（面向用户）
        code: 错误代码（用于程序判断，支持 ErrorCode 枚举或字符串）
        status_code: HTTP 状态码
        details: 详细错误信息列表
        extra: 额外的上下文信息

    使用示例:
        raise BusinessException("操作失败", code=ErrorCode.OPERATION_FAILED)

        raise BusinessException(
            message="菜单项排序失败",
            code=ErrorCode.OPERATION_FAILED,
            extra={"menu_id": 3}
        )
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.BUSINESS_ERROR,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        """初始化业务异常

        Args:
            message: 错误消息
            code: 错误代码
            status_code: HTTP 状态码
            details: 详细错误信息列表
            **extra: 额外的上下文信息
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            # 返回深拷贝，避免调用方修改返回值反向污染异常对象内部状态
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra)
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"status_code={self.status_code})"
        )


class FieldErrorsMixin:
    """字段级错误支持

    表单类调用方需要按字段回显错误，例如 {"slug": "Slug already exists"}。
    field_errors 同时写入 details，保证 to_dict() 输出可读。
    """

    field_errors: Dict[str, str]

    def _init_field_errors(
        self,
        field_errors: Optional[Dict[str, str]],
        details: Optional[List[str]],
    ) -> List[str]:
        self.field_errors = dict(field_errors or {})
        if details is None and self.field_errors:
            details = [f"{field}: {msg}" for field, msg in self.field_errors.items()]
        return details

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field_errors"] = dict(self.field_errors)
        return data


class ResourceNotFoundException(BusinessException):
    """资源不存在异常

    当请求的资源不存在时抛出此异常。

    使用示例:
        raise ResourceNotFoundException(
            "Category not found",
            code=ErrorCode.CATEGORY_NOT_FOUND,
            resource_type="category",
            resource_id=12
        )
    """

    def __init__(
        self,
        message: str = "资源不存在",
        code: ErrorCodeType = ErrorCode.RESOURCE_NOT_FOUND,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            **extra
        )


class ResourceConflictException(FieldErrorsMixin, BusinessException):
    """资源冲突异常

    当资源已存在或发生冲突时抛出此异常（如 slug 重复、翻译已存在）。

    使用示例:
        raise ResourceConflictException(
            "Slug already exists",
            code=ErrorCode.SLUG_EXISTS,
            field_errors={"slug": "Slug already exists"}
        )
    """

    def __init__(
        self,
        message: str = "资源冲突",
        code: ErrorCodeType = ErrorCode.RESOURCE_CONFLICT,
        details: Optional[List[str]] = None,
        field_errors: Optional[Dict[str, str]] = None,
        **extra: Any
    ):
        details = self._init_field_errors(field_errors, details)
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            **extra
        )


class ValidationException(FieldErrorsMixin, BusinessException):
    """数据验证异常

    当数据验证失败时抛出此异常。表单场景下按字段收集错误。

    使用示例:
        # 单字段
        raise ValidationException(
            "数据验证失败",
            field_errors={"parent_id": "Category cannot be its own parent"}
        )

        # 结构性错误（中断整个操作）
        raise ValidationException(
            "item 12 does not belong to this menu",
            code=ErrorCode.WRONG_COLLECTION
        )
    """

    def __init__(
        self,
        message: str = "数据验证失败",
        code: ErrorCodeType = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[str]] = None,
        field_errors: Optional[Dict[str, str]] = None,
        **extra: Any
    ):
        details = self._init_field_errors(field_errors, details)
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            **extra
        )


class LanguageException(BusinessException):
    """语言相关异常

    目标语言不存在、未启用，或试图停用/删除默认语言时抛出。
    语言不存在时状态码为 404，其余为 400。

    使用示例:
        raise LanguageException("Language not found", code=ErrorCode.LANGUAGE_NOT_FOUND)
        raise LanguageException("Cannot deactivate the default language",
                                code=ErrorCode.DEFAULT_LANGUAGE_PROTECTED)
    """

    def __init__(
        self,
        message: str = "语言错误",
        code: ErrorCodeType = ErrorCode.LANGUAGE_NOT_FOUND,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        if code == ErrorCode.LANGUAGE_NOT_FOUND:
            status_code = status.HTTP_404_NOT_FOUND
        else:
            status_code = status.HTTP_400_BAD_REQUEST
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details=details,
            **extra
        )


class ServiceUnavailableException(BusinessException):
    """服务不可用异常

    数据库等底层存储失败时抛出，消息不包含内部细节。

    使用示例:
        raise ServiceUnavailableException("数据库操作失败", code=ErrorCode.DATABASE_ERROR)
    """

    def __init__(
        self,
        message: str = "服务暂时不可用",
        code: ErrorCodeType = ErrorCode.SERVICE_UNAVAILABLE,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            **extra
        )


class Err:
    """异常快捷创建类

    提供统一入口，只需导入一个类，即可创建所有类型的业务异常。

    使用示例:
        from ycms.exceptions import Err

        # 资源不存在 (404)
        raise Err.not_found("Category not found", resource_type="category", resource_id=3)

        # 资源冲突 (409)
        raise Err.conflict("Slug already exists", field_errors={"slug": "Slug already exists"})

        # 数据验证失败 (422)
        raise Err.invalid("数据验证失败", field_errors={"name": "Name is required"})

        # 语言错误 (404/400)
        raise Err.language("Language not found")

        # 服务不可用 (503)
        raise Err.unavailable("数据库操作失败")

        # 通用业务异常 (400)
        raise Err.fail("操作失败")
    """

    @staticmethod
    def not_found(message: str = "资源不存在", **kwargs) -> ResourceNotFoundException:
        """资源不存在 (404)

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details, resource_type, resource_id 等）
        """
        return ResourceNotFoundException(message, **kwargs)

    @staticmethod
    def conflict(message: str = "资源冲突", **kwargs) -> ResourceConflictException:
        """资源冲突 (409)

        适用场景: slug 已存在、翻译已存在、语言代码重复等

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details, field_errors 等）
        """
        return ResourceConflictException(message, **kwargs)

    @staticmethod
    def invalid(message: str = "数据验证失败", **kwargs) -> ValidationException:
        """数据验证失败 (422)

        适用场景: slug 格式错误、循环父节点、菜单项不属于当前菜单等

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details, field_errors 等）
        """
        return ValidationException(message, **kwargs)

    @staticmethod
    def language(message: str = "语言错误", **kwargs) -> LanguageException:
        """语言错误 (404/400)

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details, language_code 等）
        """
        return LanguageException(message, **kwargs)

    @staticmethod
    def unavailable(message: str = "服务暂时不可用", **kwargs) -> ServiceUnavailableException:
        """服务不可用 (503)

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details 等）
        """
        return ServiceUnavailableException(message, **kwargs)

    @staticmethod
    def fail(message: str = "操作失败", **kwargs) -> BusinessException:
        """通用业务异常 (400)

        Args:
            message: 错误消息
            **kwargs: 额外参数（code, details 等）
        """
        return BusinessException(message, **kwargs)
