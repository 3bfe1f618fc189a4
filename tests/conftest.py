"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 内存数据库（init_database 建表，开启 SQLite 外键）
- 默认 CMS 配置
- 常用语言数据
"""

import pytest

from ycms.config import CmsSettings, configure_cms
from ycms.orm import CoreModel, db_manager, init_database


# ==================== 数据库 Fixtures ====================

@pytest.fixture
def session_scope():
    """内存数据库和 scoped session

    模型查询、save() 和 transaction_manager 都通过 db_manager 使用这个 session。
    """
    _, scope = init_database("sqlite:///:memory:", create_tables=True)
    yield scope
    db_manager.dispose()
    CoreModel.query = None


@pytest.fixture(autouse=True)
def default_cms_settings():
    """每个测试使用默认 CMS 配置"""
    previous = configure_cms(CmsSettings())
    yield
    configure_cms(previous)


# ==================== 数据 Fixtures ====================

@pytest.fixture
def languages(session_scope):
    """en（默认）、fr、de 三个启用语言和一个未启用的 es"""
    from ycms.i18n import Language

    data = [
        ("en", "English", True, True),
        ("fr", "French", True, False),
        ("de", "German", True, False),
        ("es", "Spanish", False, False),
    ]
    result = {}
    for position, (code, name, is_active, is_default) in enumerate(data):
        language = Language(
            code=code,
            name=name,
            native_name=name,
            is_active=is_active,
            is_default=is_default,
            position=position,
        )
        language.save(commit=True)
        result[code] = language
    return result
