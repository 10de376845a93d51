"""
Test cases for RepositoryLock.
Builds of the same repository branch must never overlap; other keys run freely.
"""

import asyncio

import pytest

from pagesbuilder.build.lock import RepositoryLock


def make_lock(tmp_path, repo_name='repo_name', branch='pages', **kwargs) -> RepositoryLock:
    return RepositoryLock(str(tmp_path), repo_name, branch, poll_interval=0.01, **kwargs)


class TestLockSerialization:
    """Test mutual exclusion per (repository, branch)"""

    @pytest.mark.asyncio
    async def test_same_key_never_overlaps(self, tmp_path):
        """Test that critical sections for the same key run one after the other"""
        events = []

        async def operation(name):
            events.append(f"{name}:start")
            await asyncio.sleep(0.05)
            events.append(f"{name}:end")
            return name

        first = make_lock(tmp_path)
        second = make_lock(tmp_path)

        results = await asyncio.gather(
            first.do_locked_operation(lambda: operation('first')),
            second.do_locked_operation(lambda: operation('second'))
        )

        assert results == ['first', 'second']
        assert events == ['first:start', 'first:end', 'second:start', 'second:end']

    @pytest.mark.asyncio
    async def test_distinct_keys_overlap(self, tmp_path):
        """Test that different branches of a repository build concurrently"""
        pages_started = asyncio.Event()
        staging_started = asyncio.Event()

        async def pages_build():
            pages_started.set()
            await asyncio.wait_for(staging_started.wait(), timeout=1)

        async def staging_build():
            staging_started.set()
            await asyncio.wait_for(pages_started.wait(), timeout=1)

        await asyncio.gather(
            make_lock(tmp_path, branch='pages').do_locked_operation(pages_build),
            make_lock(tmp_path, branch='pages-staging').do_locked_operation(staging_build)
        )

    @pytest.mark.asyncio
    async def test_released_when_operation_fails(self, tmp_path):
        """Test that the lock is released when the operation raises"""
        lock = make_lock(tmp_path)

        async def failing_build():
            assert lock.is_locked()
            raise ValueError('build failed')

        with pytest.raises(ValueError, match='build failed'):
            await lock.do_locked_operation(failing_build)

        assert not lock.is_locked()
        assert await make_lock(tmp_path).do_locked_operation(lambda: asyncio.sleep(0, 'ok')) == 'ok'

    @pytest.mark.asyncio
    async def test_waiter_runs_after_failed_holder(self, tmp_path):
        """Test that a queued build starts once a failing build settles"""
        events = []

        async def failing_build():
            events.append('failing:start')
            await asyncio.sleep(0.03)
            raise RuntimeError('boom')

        async def next_build():
            events.append('next:start')

        results = await asyncio.gather(
            make_lock(tmp_path).do_locked_operation(failing_build),
            make_lock(tmp_path).do_locked_operation(next_build),
            return_exceptions=True
        )

        assert isinstance(results[0], RuntimeError)
        assert events == ['failing:start', 'next:start']


class TestLockLifecycle:
    """Test acquire/release bookkeeping"""

    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path):
        """Test that an optional timeout gives up on a busy lock"""
        holder = make_lock(tmp_path)
        await holder.acquire()
        try:
            with pytest.raises(TimeoutError):
                await make_lock(tmp_path, timeout=0.05).acquire()
        finally:
            holder.release()

    @pytest.mark.asyncio
    async def test_release_is_idempotent(self, tmp_path):
        """Test that releasing an unheld lock does nothing"""
        lock = make_lock(tmp_path)
        lock.release()

        async with lock:
            assert lock.is_locked()
        lock.release()

        assert not lock.is_locked()

    def test_lock_file_per_key(self, tmp_path):
        """Test that the lock file name carries repository and branch"""
        lock = make_lock(tmp_path, branch='feature/docs')

        assert lock.lock_file_path.name == '.update-lock-repo_name-feature-docs'
        assert not lock.is_locked()
