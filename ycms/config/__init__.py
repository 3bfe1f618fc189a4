"""配置模块

提供配置管理功能：
- AppSettings: 应用配置，支持 YAML + 环境变量
- 子配置类: DatabaseSettings, LoggingSettings, CmsSettings
- ConfigLoader: YAML 配置加载器

配置优先级: YAML 文件（作为构造参数传入）> 环境变量 > 默认值
"""

from .settings import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    CmsSettings,
    get_cms_settings,
    configure_cms,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "CmsSettings",
    "get_cms_settings",
    "configure_cms",
    "ConfigLoader",
    "load_yaml_config",
]
