"""数据库连接与会话

init_database() 创建引擎和线程隔离的 scoped session，并把它挂到 CoreModel.query 上，
此后 Category.query、CoreModel.save() 和 transaction_manager 使用同一个 session。

使用示例:
    from ycms.orm import init_database, db_session_scope

    init_database(config=settings.database, logging_config=settings.logging)

    with db_session_scope():
        MenuService().reorder_items(menu_id, tree)
"""

from contextlib import contextmanager
from typing import Any, Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..log import get_logger, setup_sql_logger

_logger = get_logger("ycms.orm.session")

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite 默认不检查外键，ON DELETE CASCADE / SET NULL 需要打开"""

    @event.listens_for(engine, "connect")
    def _foreign_keys_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _build_engine(url: str, echo: bool, pool_size: int, max_overflow: int,
                  pool_recycle: int, pool_pre_ping: bool) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=pool_recycle,
            pool_pre_ping=pool_pre_ping,
        )

    options = {"echo": echo, "connect_args": {"check_same_thread": False}}
    if url in _MEMORY_URLS:
        # 内存库只存在于一个连接上
        options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = pool_pre_ping
    engine = create_engine(url, **options)
    enable_sqlite_foreign_keys(engine)
    return engine


class DatabaseManager:
    """持有引擎和 scoped session

    模块级实例 db_manager 供 CoreModel 和事务管理器取 session。
    """

    def __init__(self):
        self._engine: Optional[Engine] = None
        self._scope: Optional[scoped_session] = None

    @property
    def is_initialized(self) -> bool:
        return self._scope is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("数据库未初始化，请先调用 init_database()")
        return self._engine

    @property
    def session_scope(self) -> scoped_session:
        if self._scope is None:
            raise RuntimeError("数据库未初始化，请先调用 init_database()")
        return self._scope

    def init(
        self,
        database_url: str = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        config: Any = None,
        logging_config: Any = None,
        create_tables: bool = False,
    ):
        """创建引擎和 scoped session

        Args:
            database_url: 连接 URL，提供 config 时以 config.url 为准
            config: DatabaseSettings，覆盖上面的连接参数
            logging_config: LoggingSettings，sql_log_enabled 为真时打开 SQL 日志
            create_tables: 导入 CMS 模型并建表

        Returns:
            tuple: (engine, session_scope)
        """
        if config is not None:
            database_url = config.url
            echo = config.echo
            pool_size = config.pool_size
            max_overflow = config.max_overflow
            pool_recycle = config.pool_recycle
            pool_pre_ping = config.pool_pre_ping
        if not database_url:
            raise ValueError("缺少 database_url")

        if logging_config is not None and logging_config.sql_log_enabled:
            setup_sql_logger(level=logging_config.sql_log_level)

        if self._engine is not None:
            self.dispose()

        self._engine = _build_engine(
            database_url, echo, pool_size, max_overflow, pool_recycle, pool_pre_ping
        )
        self._scope = scoped_session(
            sessionmaker(autocommit=False, autoflush=True, bind=self._engine)
        )
        _logger.info(f"数据库引擎已创建: {self._engine.url.get_backend_name()}")

        from .core_model import Base, CoreModel

        CoreModel.query = self._scope.query_property()

        if create_tables:
            import ycms.content.models  # noqa: F401
            import ycms.i18n.models  # noqa: F401
            Base.metadata.create_all(bind=self._engine)
            _logger.info("数据表已创建")

        return self._engine, self._scope

    def get_session(self) -> Session:
        """当前线程的 session"""
        return self.session_scope()

    def cleanup(self) -> None:
        """移除当前线程的 session，可重复调用"""
        if self._scope is not None and self._scope.registry.has():
            self._scope.remove()

    def dispose(self) -> None:
        """关闭 session 和连接池（测试结束或应用退出时）"""
        self.cleanup()
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._scope = None


db_manager = DatabaseManager()


def init_database(database_url: str = None, **kwargs):
    """db_manager.init() 的快捷方式"""
    return db_manager.init(database_url=database_url, **kwargs)


def get_engine() -> Engine:
    return db_manager.engine


@contextmanager
def db_session_scope(auto_commit: bool = True) -> Generator[Session, None, None]:
    """脚本和后台任务中的工作单元：正常结束提交，异常回滚，最后移除 session"""
    session = db_manager.get_session()
    try:
        yield session
        if auto_commit:
            session.commit()
    except Exception:
        session.rollback()
        _logger.debug("db_session_scope 异常，已回滚")
        raise
    finally:
        db_manager.cleanup()


__all__ = [
    "db_manager",
    "DatabaseManager",
    "init_database",
    "get_engine",
    "db_session_scope",
    "enable_sqlite_foreign_keys",
]
