"""日志模块测试"""

import logging
import re

import pytest

from ycms.config import LoggingSettings
from ycms.log import MicrosecondFormatter, get_logger, setup_logger, setup_root_logger


class TestGetLogger:

    def test_short_name_gets_prefix(self):
        assert get_logger("orm").name == "ycms.orm"

    def test_full_name_kept(self):
        assert get_logger("ycms.orm.tree").name == "ycms.orm.tree"
        assert get_logger("sqlalchemy.engine").name == "sqlalchemy.engine"

    def test_infers_module_name(self):
        assert get_logger().name == __name__


class TestSetupLogger:

    def test_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cms.log"
        logger = setup_logger("ycms.test_file", level="DEBUG", log_file=str(log_file), console=False)
        try:
            logger.debug("写入测试")
            for handler in logger.handlers:
                handler.flush()

            content = log_file.read_text(encoding="utf-8")
            assert "写入测试" in content
            assert "ycms.test_file" in content
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_level_and_handlers_reset(self):
        logger = setup_logger("ycms.test_level", level="warning")
        setup_logger("ycms.test_level", level="warning")
        try:
            assert logger.level == logging.WARNING
            assert len(logger.handlers) == 1
        finally:
            logger.handlers.clear()


class TestMicrosecondFormatter:

    def test_microseconds(self):
        formatter = MicrosecondFormatter(fmt="%(asctime)s %(message)s")
        record = logging.LogRecord("ycms", logging.INFO, __file__, 1, "hello", None, None)

        output = formatter.format(record)

        assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{6} hello$", output)


class TestSetupRootLogger:
    """根日志器配置测试"""

    @pytest.fixture(autouse=True)
    def isolated_root(self, monkeypatch):
        """替换为独立的根日志器，并恢复 SQL 日志器的状态"""
        self.root = logging.RootLogger(logging.WARNING)
        monkeypatch.setattr(logging, "root", self.root)
        sql_logger = logging.getLogger("sqlalchemy.engine")
        saved = (sql_logger.level, sql_logger.propagate, list(sql_logger.handlers))
        yield
        for handler in self.root.handlers + sql_logger.handlers:
            if isinstance(handler, logging.FileHandler):
                handler.close()
        sql_logger.setLevel(saved[0])
        sql_logger.propagate = saved[1]
        sql_logger.handlers[:] = saved[2]

    def test_from_settings(self, tmp_path):
        log_file = tmp_path / "cms.log"
        config = LoggingSettings(
            level="WARNING",
            file_path=str(log_file),
            enable_console=False,
            sql_log_enabled=True,
            sql_log_level="INFO",
        )

        root = setup_root_logger(config=config)
        root.warning("分类已删除")
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.WARNING
        assert [type(handler) for handler in root.handlers] == [logging.FileHandler]
        assert root is self.root
        assert "分类已删除" in log_file.read_text(encoding="utf-8")
        sql_logger = logging.getLogger("sqlalchemy.engine")
        assert sql_logger.level == logging.INFO
        assert sql_logger.propagate is False

    def test_plain_formatter(self):
        root = setup_root_logger(level="DEBUG", use_microseconds=False)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert type(root.handlers[0].formatter) is logging.Formatter
