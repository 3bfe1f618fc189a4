"""配置模块测试

测试默认值、环境变量覆盖、YAML 加载和全局 CMS 配置替换
"""

import pytest

from ycms.config import (
    AppSettings,
    CmsSettings,
    ConfigLoader,
    DatabaseSettings,
    LoggingSettings,
    configure_cms,
    get_cms_settings,
    load_yaml_config,
)


class TestSettingsDefaults:

    def test_cms_defaults(self):
        settings = CmsSettings()
        assert settings.translation_slug_separator == "-"
        assert settings.slug_suffix_start == 2
        assert settings.max_slug_length == 255
        assert settings.min_name_length == 2
        assert settings.menu_item_default_target == "_self"

    def test_env_prefix(self, monkeypatch):
        """环境变量按前缀覆盖默认值"""
        monkeypatch.setenv("YCMS_CMS_MIN_NAME_LENGTH", "3")
        monkeypatch.setenv("YCMS_DB_URL", "sqlite:///./test.db")
        monkeypatch.setenv("YCMS_LOG_LEVEL", "DEBUG")

        assert CmsSettings().min_name_length == 3
        assert DatabaseSettings().url == "sqlite:///./test.db"
        assert LoggingSettings().level == "DEBUG"


class TestConfigLoader:

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        ConfigLoader.clear_cache()
        yield
        ConfigLoader.clear_cache()

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            "database:\n"
            "  url: sqlite:///./cms.db\n"
            "cms:\n"
            "  min_name_length: 3\n"
            "  translation_slug_separator: _\n",
            encoding="utf-8",
        )

        settings = load_yaml_config(str(config_file), AppSettings)

        assert settings.database.url == "sqlite:///./cms.db"
        assert settings.cms.min_name_length == 3
        assert settings.cms.translation_slug_separator == "_"
        assert settings.logging.level == "INFO"

    def test_cache_and_reload(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("cms:\n  max_slug_length: 100\n", encoding="utf-8")

        first = ConfigLoader.load("settings.yaml", base_dir=str(tmp_path))
        config_file.write_text("cms:\n  max_slug_length: 50\n", encoding="utf-8")

        assert ConfigLoader.load("settings.yaml", base_dir=str(tmp_path)) is first
        reloaded = ConfigLoader.reload("settings.yaml", base_dir=str(tmp_path))
        assert reloaded["cms"]["max_slug_length"] == 50

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert ConfigLoader.load(str(config_file)) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))


class TestConfigureCms:

    def test_replace_and_restore(self):
        custom = CmsSettings(translation_slug_separator="_")

        previous = configure_cms(custom)
        try:
            assert get_cms_settings() is custom
        finally:
            configure_cms(previous)

        assert get_cms_settings() is previous
