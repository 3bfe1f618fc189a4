"""事务管理器测试

测试 TransactionManager 的核心功能：
1. 提交、回滚和状态转换
2. REQUIRED 传播（内层加入外层事务）
3. MANDATORY 在无事务时的检查
4. 事务内 save(commit=True) 的提交抑制
5. 提交/回滚回调
"""

import pytest

from ycms.content.models import Tag
from ycms.orm import db_manager, db_session_scope, get_engine, transaction_manager as tm
from ycms.orm.transaction import (
    PropagationError,
    TransactionAlreadyCommittedError,
    TransactionPropagation,
    TransactionState,
    get_current_transaction,
)


class TestTransaction:
    """事务测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """初始化数据库"""
        self.session_scope = session_scope

    def _count(self):
        self.session_scope.expire_all()
        return Tag.query.count()

    def test_commit(self):
        with tm.transaction() as tx:
            Tag(name="Python", slug="python").save()
            assert tx.state == TransactionState.ACTIVE
            assert tm.is_in_transaction()

        assert tx.state == TransactionState.COMMITTED
        assert not tm.is_in_transaction()
        assert get_current_transaction() is None
        assert self._count() == 1

    def test_rollback_on_exception(self):
        with pytest.raises(ValueError):
            with tm.transaction() as tx:
                Tag(name="Python", slug="python").save(commit=True)
                raise ValueError("测试异常")

        assert tx.state == TransactionState.ROLLED_BACK
        assert self._count() == 0

    def test_commit_suppressed_inside_transaction(self):
        """事务中 save(commit=True) 只 flush，id 可用但未提交"""
        with pytest.raises(RuntimeError):
            with tm.transaction():
                tag = Tag(name="Python", slug="python").save(commit=True)
                assert tag.id is not None
                raise RuntimeError("中断")

        assert self._count() == 0

    def test_required_joins_outer(self):
        """内层事务加入外层，内层异常导致整体回滚"""
        with pytest.raises(ValueError):
            with tm.transaction() as outer:
                Tag(name="Outer", slug="outer").save(commit=True)
                with tm.transaction() as inner:
                    assert inner is outer
                    assert outer.nesting_level == 2
                    Tag(name="Inner", slug="inner").save(commit=True)
                    raise ValueError("内层失败")

        assert self._count() == 0

    def test_inner_success_commits_with_outer(self):
        with tm.transaction() as outer:
            with tm.transaction():
                Tag(name="Inner", slug="inner").save(commit=True)
            assert outer.is_active
            assert outer.nesting_level == 1

        assert self._count() == 1

    def test_mandatory_requires_transaction(self):
        with pytest.raises(PropagationError):
            with tm.transaction(propagation=TransactionPropagation.MANDATORY):
                pass

    def test_mandatory_joins_existing(self):
        with tm.transaction() as outer:
            with tm.transaction(propagation=TransactionPropagation.MANDATORY) as inner:
                assert inner is outer
                Tag(name="Python", slug="python").save(commit=True)

        assert self._count() == 1

    def test_uses_model_session(self):
        """事务与 Model.query 使用同一个 scoped session"""
        with tm.transaction() as tx:
            assert tx.session is self.session_scope()
            assert tx.session is Tag.query.session

    def test_manual_rollback(self):
        with tm.transaction(auto_commit=False) as tx:
            Tag(name="Python", slug="python").save(commit=True)
            tx.rollback()

        assert tx.state == TransactionState.ROLLED_BACK
        assert self._count() == 0

    def test_commit_twice_rejected(self):
        with tm.transaction() as tx:
            pass
        with pytest.raises(TransactionAlreadyCommittedError):
            tx.commit()

    def test_callbacks(self):
        events = []

        with tm.transaction() as tx:
            tx.after_commit(lambda ctx: events.append("commit"))
            tx.after_rollback(lambda ctx: events.append("rollback"))

        with pytest.raises(ValueError):
            with tm.transaction() as tx2:
                tx2.after_rollback(lambda ctx: events.append("rollback"))
                raise ValueError

        assert events == ["commit", "rollback"]

    def test_failing_callback_does_not_break_commit(self):
        def broken(ctx):
            raise RuntimeError("回调失败")

        with tm.transaction() as tx:
            Tag(name="Python", slug="python").save()
            tx.after_commit(broken)

        assert tx.state == TransactionState.COMMITTED
        assert self._count() == 1

    def test_transactional_decorator(self):
        @tm.transactional()
        def create_two():
            Tag(name="One", slug="one").save(commit=True)
            Tag(name="Two", slug="one").save(commit=True)

        with pytest.raises(Exception):
            create_two()

        assert self._count() == 0


class TestDbSessionScope:
    """db_session_scope 测试"""

    @pytest.fixture(autouse=True)
    def setup_db(self, session_scope):
        """初始化数据库"""
        self.session_scope = session_scope

    def test_commits_on_success(self):
        with db_session_scope() as session:
            session.add(Tag(name="Python", slug="python"))

        assert Tag.query.count() == 1

    def test_rollback_on_exception(self):
        with pytest.raises(ValueError):
            with db_session_scope() as session:
                session.add(Tag(name="Python", slug="python"))
                session.flush()
                raise ValueError("中断")

        assert Tag.query.count() == 0

    def test_engine_available(self):
        assert get_engine() is db_manager.engine
        assert db_manager.is_initialized
