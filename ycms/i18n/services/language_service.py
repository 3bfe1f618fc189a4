"""
多语言模块 - 语言服务

维护语言的业务规则：

- 任一时刻只有一个默认语言，第一个创建的语言自动成为默认
- 默认语言不能停用，也不能删除
- 未启用的语言不能设为默认
- 仍有内容引用的语言不能删除
"""

from typing import List, Optional, Sequence, Type

from ...enums import TextDirection
from ...exceptions import Err, ErrorCode
from ...log import get_logger
from ...orm import map_db_errors, transaction_manager
from ...validators import FieldErrors, validate_direction, validate_language_code, validate_name
from ..models import Language

logger = get_logger("ycms.i18n.language")


def _code_conflict(e=None):
    return Err.conflict(
        "Language code already exists",
        code=ErrorCode.LANGUAGE_CODE_EXISTS,
        field_errors={"code": "Language code already exists"},
    )


class LanguageService:
    """语言服务

    使用示例:
        service = LanguageService()
        en = service.create_language("en", "English")   # 第一个语言自动成为默认
        fr = service.create_language("fr", "French", native_name="Français")
        service.set_default(fr.id)
    """

    # 引用 language_id 的内容模型，删除语言前检查；None 时使用内置内容模型
    usage_models: Optional[Sequence[Type]] = None

    # ==================== 查询 ====================

    def get_language(self, language_id: int) -> Language:
        language = Language.get(language_id)
        if language is None:
            raise Err.language(
                f"Language {language_id} not found",
                code=ErrorCode.LANGUAGE_NOT_FOUND,
                language_id=language_id,
            )
        return language

    def get_by_code(self, code: str) -> Optional[Language]:
        return Language.get_by_code(code)

    def get_default(self) -> Optional[Language]:
        return Language.get_default()

    def list_active(self) -> List[Language]:
        return Language.list_active()

    def list_languages(self) -> List[Language]:
        return Language.list_all()

    # ==================== 创建与更新 ====================

    def create_language(
        self,
        code: str,
        name: str,
        native_name: str = "",
        direction: str = TextDirection.LTR.value,
        is_active: bool = True,
        is_default: bool = False,
    ) -> Language:
        """创建语言

        Raises:
            ValidationException: 代码、名称或书写方向不合法
            ResourceConflictException: 语言代码已存在
            LanguageException: 试图把未启用的语言设为默认
        """
        code = (code or "").strip().lower()
        errors = FieldErrors()
        errors.add("code", validate_language_code(code))
        errors.add("name", validate_name(name, min_length=1))
        errors.add("direction", validate_direction(direction))
        if "code" not in errors and Language.get_by_code(code) is not None:
            raise _code_conflict()
        errors.raise_if_any()

        # 第一个语言自动成为默认
        if Language.get_default() is None:
            is_default = True
        if is_default and not is_active:
            raise Err.language(
                "Inactive language cannot be the default",
                code=ErrorCode.LANGUAGE_INACTIVE,
            )

        with map_db_errors("create_language", conflict=_code_conflict):
            with transaction_manager.transaction():
                if is_default:
                    self._clear_default()
                language = Language(
                    code=code,
                    name=name.strip(),
                    native_name=native_name or "",
                    direction=direction,
                    is_active=is_active,
                    is_default=is_default,
                )
                language.init_position()
                language.save(commit=True)

        logger.info(f"创建语言: {code} (default={is_default})")
        return language

    def update_language(self, language_id: int, **fields) -> Language:
        """更新语言（name, native_name, direction, is_active, position）

        语言代码和默认标记不通过此方法修改，默认语言请使用 set_default。

        Raises:
            LanguageException: 试图停用默认语言
        """
        language = self.get_language(language_id)
        fields.pop("code", None)
        fields.pop("is_default", None)

        errors = FieldErrors()
        if "name" in fields:
            errors.add("name", validate_name(fields["name"], min_length=1))
        if "direction" in fields:
            errors.add("direction", validate_direction(fields["direction"]))
        errors.raise_if_any()

        if "is_active" in fields:
            fields["is_active"] = bool(fields["is_active"])
            if not fields["is_active"] and language.is_default:
                raise Err.language(
                    "Cannot deactivate the default language",
                    code=ErrorCode.DEFAULT_LANGUAGE_PROTECTED,
                    language_code=language.code,
                )

        with map_db_errors("update_language"):
            language.update_properties(**fields)
            language.save(commit=True)
        return language

    def set_default(self, language_id: int) -> Language:
        """设置默认语言，同一事务中清除原默认语言

        Raises:
            LanguageException: 语言不存在或未启用
        """
        language = self.get_language(language_id)
        if not language.is_active:
            raise Err.language(
                "Inactive language cannot be the default",
                code=ErrorCode.LANGUAGE_INACTIVE,
                language_code=language.code,
            )
        if language.is_default:
            return language

        with map_db_errors("set_default_language"):
            with transaction_manager.transaction():
                self._clear_default()
                language.is_default = True
                language.save(commit=True)

        logger.info(f"默认语言切换为: {language.code}")
        return language

    def _clear_default(self) -> None:
        for current in Language.query.filter(Language.is_default.is_(True)).all():
            current.is_default = False
        transaction_manager.get_session().flush()

    # ==================== 删除 ====================

    def _usage_models(self) -> Sequence[Type]:
        if self.usage_models is not None:
            return self.usage_models
        from ...content.models import Category, Menu, Page, Tag
        return (Page, Category, Tag, Menu)

    def count_usage(self, language_id: int) -> int:
        """统计引用该语言的内容数量"""
        return sum(
            model.query.filter(model.language_id == language_id).count()
            for model in self._usage_models()
        )

    def delete_language(self, language_id: int) -> None:
        """删除语言

        Raises:
            LanguageException: 语言不存在、是默认语言或仍被内容引用
        """
        language = self.get_language(language_id)
        if language.is_default:
            raise Err.language(
                "Cannot delete the default language",
                code=ErrorCode.DEFAULT_LANGUAGE_PROTECTED,
                language_code=language.code,
            )

        usage = self.count_usage(language_id)
        if usage > 0:
            raise Err.language(
                f"Language is used by {usage} items and cannot be deleted",
                code=ErrorCode.LANGUAGE_IN_USE,
                language_code=language.code,
                usage=usage,
            )

        with map_db_errors("delete_language"):
            language.delete(commit=True)
        logger.info(f"删除语言: {language.code}")


__all__ = ["LanguageService"]
