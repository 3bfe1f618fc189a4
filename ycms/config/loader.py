"""YAML 配置加载

使用示例:
    from ycms.config import AppSettings, load_yaml_config

    settings = load_yaml_config("config/settings.yaml", AppSettings)
    init_database(config=settings.database, logging_config=settings.logging)
"""

import os
from typing import Any, Dict, Optional, Type, TypeVar

import yaml

T = TypeVar("T")


class ConfigLoader:
    """读取 YAML 文件为字典，按绝对路径缓存

    相对路径相对 base_dir 解析，未给出时相对当前工作目录。
    """

    _cache: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def _path(config_path: str, base_dir: Optional[str]) -> str:
        if base_dir and not os.path.isabs(config_path):
            config_path = os.path.join(base_dir, config_path)
        return os.path.abspath(config_path)

    @classmethod
    def load(cls, config_path: str, base_dir: Optional[str] = None, use_cache: bool = True) -> Dict[str, Any]:
        """读取配置，空文件返回 {}

        Raises:
            FileNotFoundError: 文件不存在
            yaml.YAMLError: 内容不是合法 YAML
        """
        path = cls._path(config_path, base_dir)
        if use_cache and path in cls._cache:
            return cls._cache[path]
        if not os.path.isfile(path):
            raise FileNotFoundError(f"配置文件不存在: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if use_cache:
            cls._cache[path] = data
        return data

    @classmethod
    def reload(cls, config_path: str, base_dir: Optional[str] = None) -> Dict[str, Any]:
        """丢弃缓存后重新读取"""
        cls._cache.pop(cls._path(config_path, base_dir), None)
        return cls.load(config_path, base_dir)

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()


def load_yaml_config(config_path: str, settings_class: Type[T], base_dir: Optional[str] = None, **overrides) -> T:
    """读取 YAML 并构造 settings_class，overrides 优先于文件内容"""
    data = {**ConfigLoader.load(config_path, base_dir), **overrides}
    return settings_class(**data)
