"""
Per-repository lock serializing builds of one repository branch.
"""
import asyncio
import fcntl
import logging
import os
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TextIO


class RepositoryLock:
    """
    Serializes builds for a (repository, branch) pair.
    Uses an flock()ed marker file so separate processes sharing the
    repository directory are serialized too.
    """

    def __init__(
        self,
        lock_dir: str,
        repo_name: str,
        branch: str,
        poll_interval: float = 0.5,
        timeout: Optional[float] = None
    ):
        """
        Args:
            lock_dir: Directory holding the lock files
            repo_name: Repository being built
            branch: Branch being built
            poll_interval: Seconds between acquisition attempts
            timeout: Give up after this many seconds; None waits forever
        """
        self.lock_dir = Path(lock_dir)
        self.repo_name = repo_name
        self.branch = branch
        self.poll_interval = poll_interval
        self.timeout = timeout
        safe_branch = branch.replace(os.sep, '-')
        self.lock_file_path = self.lock_dir / f".update-lock-{repo_name}-{safe_branch}"
        self.lock_file: Optional[TextIO] = None
        self.logger = logging.getLogger(__name__)

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    async def do_locked_operation(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Await `operation()` while holding the lock and return its result"""
        async with self:
            return await operation()

    async def acquire(self) -> None:
        """
        Acquire the lock, polling until it is free.

        Raises:
            TimeoutError: If a timeout is set and the lock stays busy
        """
        start_time = time.monotonic()
        self.lock_dir.mkdir(parents=True, exist_ok=True)

        self.logger.debug(f"Attempting to acquire update lock: {self.lock_file_path}")

        while True:
            # Append mode keeps the marker's inode shared by every waiter
            lock_file = open(self.lock_file_path, 'a')
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                lock_file.close()
                elapsed = time.monotonic() - start_time

                if self.timeout is not None and elapsed >= self.timeout:
                    raise TimeoutError(
                        f"Could not acquire update lock for {self.repo_name}:{self.branch} "
                        f"within {self.timeout}s"
                    )

                self.logger.debug(
                    f"Update lock for {self.repo_name}:{self.branch} busy, retrying... "
                    f"({elapsed:.1f}s)"
                )
                await asyncio.sleep(self.poll_interval)
                continue
            except Exception:
                lock_file.close()
                raise

            self.lock_file = lock_file
            self.logger.info(f"Acquired update lock for {self.repo_name}:{self.branch}")
            return

    def release(self) -> None:
        """Release the lock; a no-op when it is not held"""
        if self.lock_file is None:
            return

        lock_file, self.lock_file = self.lock_file, None
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
        finally:
            lock_file.close()
        self.logger.info(f"Released update lock for {self.repo_name}:{self.branch}")

    def is_locked(self) -> bool:
        """Check whether some build holds the lock (non-blocking)"""
        if not self.lock_file_path.exists():
            return False

        with open(self.lock_file_path, 'a') as test_file:
            try:
                fcntl.flock(test_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                return True
            fcntl.flock(test_file.fileno(), fcntl.LOCK_UN)
            return False
