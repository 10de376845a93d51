"""
Build orchestration: sync the repository, build the site and publish it.
"""
import asyncio
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from ..config.global_config_loader import GlobalConfig, BuilderConfig
from ..config.options import BuilderOptions
from ..core.models import WebhookEvent
from ..publish.s3_sync import create_s3_client
from .build_logger import BuildLogger
from .component_factory import BuildComponents

logger = logging.getLogger(__name__)


class SiteBuilder:
    """
    Runs the build sequence for one branch of one repository:

        lock -> sync repo -> resolve config -> bundle install? ->
        jekyll build or rsync -> publish each destination -> unlock

    Every step runs only after the previous one succeeded. The whole sequence
    is the critical section of the repository's update lock.
    """

    def __init__(self, branch: str, components: BuildComponents, config: GlobalConfig):
        self.branch = branch
        self.config = config
        self.git_runner = components.git_runner
        self.config_handler = components.config_handler
        self.command_runner = components.command_runner
        self.jekyll_helper = components.jekyll_helper
        self.sync = components.sync
        self.update_lock = components.update_lock

    async def build(self) -> None:
        """Run the build; any failure is raised after the lock is released"""
        await self.update_lock.do_locked_operation(self._do_build)

    async def _do_build(self) -> None:
        await self.git_runner.prepare_repo(self.branch)
        await self.config_handler.init()

        if self.config_handler.uses_bundler:
            await self.command_runner.run('bundle', [
                'install',
                '--path=' + os.path.join(self.config.home, self.config.bundler_cache_dir)
            ])

        if self.config_handler.uses_jekyll:
            await self._build_jekyll()
        else:
            await self._rsync()

        await self._sync_results()

    async def _build_jekyll(self) -> None:
        async with self.config_handler.pages_config_scope() as build_targets:
            await self.jekyll_helper.build(
                build_targets, bundler=self.config_handler.uses_bundler
            )

    async def _rsync(self) -> None:
        for target in self.config_handler.build_configurations():
            Path(target.destination).parent.mkdir(parents=True, exist_ok=True)
            await self.command_runner.run(
                'rsync', self.config.rsync_opts + ['./', target.destination]
            )

    async def _sync_results(self) -> None:
        for target in self.config_handler.build_configurations():
            await self.sync.sync(target.destination)


async def launch_builder(
    event: WebhookEvent,
    branch: str,
    builder_config: BuilderConfig,
    config: GlobalConfig,
    s3_client=None
) -> None:
    """
    Build and publish the site for `event`, leaving the build log at
    <public destination>/build.log.

    Raises the build's error, or the log relocation error if moving the log failed.
    """
    options = BuilderOptions(event, config, builder_config)
    if s3_client is None:
        s3_client = create_s3_client(config.s3)

    build_log = f"{options.site_path}.{uuid.uuid4().hex[:8]}.log"
    build_logger = BuildLogger(build_log)
    try:
        builder = SiteBuilder(
            branch,
            BuildComponents.create(config, options, branch, s3_client, build_logger),
            config
        )
    except Exception:
        build_logger.close()
        os.remove(build_log)
        raise

    _log_build_start(build_logger, event)

    error: Optional[Exception] = None
    try:
        await builder.build()
    except Exception as e:
        error = e

    _finish_build(build_logger, options.repo_name, error)

    try:
        await _migrate_log(build_log, builder.config_handler.public_destination)
    except OSError as migrate_error:
        logger.error(f"Error moving build log: {migrate_error}")
        raise migrate_error from error

    if error is not None:
        raise error


def _log_build_start(build_logger: BuildLogger, event: WebhookEvent) -> None:
    build_logger.log(f"{event.collection}/{event.repository}:",
                     'starting build at commit', event.commit.id)
    build_logger.log('description:', event.commit.message)
    build_logger.log('timestamp:', event.commit.timestamp)
    build_logger.log('author:', event.author)

    if event.committer:
        build_logger.log('committer:', event.committer)
    if event.pusher:
        build_logger.log('pusher:', event.pusher)


def _finish_build(build_logger: BuildLogger, repo_name: str, error: Optional[Exception]) -> None:
    if error is not None:
        build_logger.error(str(error) or repr(error))
        build_logger.error(f"{repo_name}: build failed")
    else:
        build_logger.log(f"{repo_name}: build successful")
    build_logger.close()


async def _migrate_log(build_log: str, destination: str) -> None:
    # Copy then delete: the repository and site trees may live on different
    # volumes, where rename() fails with EXDEV.
    new_log_path = os.path.join(destination, 'build.log')
    await asyncio.to_thread(_copy_log, build_log, new_log_path)
    await asyncio.to_thread(os.remove, build_log)


def _copy_log(source_log: str, target_log: str) -> None:
    Path(target_log).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source_log, target_log)
