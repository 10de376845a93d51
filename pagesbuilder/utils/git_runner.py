"""
Brings a repository working copy up to date with a branch.
"""
import os
from pathlib import Path

from ..config.options import BuilderOptions
from ..core.exceptions import CommandError, RepoSyncError
from .command_runner import CommandRunner


class GitRunner:
    """Clones a repository or syncs an existing working copy"""

    def __init__(self, options: BuilderOptions, command_runner: CommandRunner, build_logger):
        self.options = options
        self.command_runner = command_runner
        self.build_logger = build_logger

    async def prepare_repo(self, branch: str) -> None:
        """
        Check out the head of `branch` in the working copy.

        Raises:
            RepoSyncError: If any git command fails
        """
        if os.path.isdir(self.options.site_path):
            await self._sync_repo(branch)
        else:
            await self._clone_repo(branch)

    async def _sync_repo(self, branch: str) -> None:
        self.build_logger.log('syncing repo:', self.options.repo_name)
        commands = [
            ['fetch', 'origin', branch],
            ['clean', '-f', '-d'],
            ['reset', '--hard', f'origin/{branch}'],
            ['submodule', 'update', '--init', '--recursive'],
        ]
        try:
            for args in commands:
                await self.command_runner.run('git', args, cwd=self.options.site_path)
        except CommandError as e:
            raise RepoSyncError('sync', self.options.repo_name, e) from e

    async def _clone_repo(self, branch: str) -> None:
        Path(self.options.repo_dir).mkdir(parents=True, exist_ok=True)
        self.build_logger.log('cloning', self.options.repo_name, 'into', self.options.site_path)
        try:
            await self.command_runner.run(
                'git',
                ['clone', self.options.git_url, '--branch', branch],
                cwd=self.options.repo_dir
            )
        except CommandError as e:
            raise RepoSyncError('clone', self.options.repo_name, e) from e
