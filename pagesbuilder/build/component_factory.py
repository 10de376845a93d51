"""
Wires up the collaborators used by a SiteBuilder.
"""
from dataclasses import dataclass

from ..config.global_config_loader import GlobalConfig
from ..config.options import BuilderOptions
from ..publish.s3_sync import S3Sync
from ..utils.command_runner import CommandRunner
from ..utils.git_runner import GitRunner
from .config_handler import ConfigHandler
from .file_handler import RepoFileHandler
from .jekyll_helper import JekyllCommandHelper
from .lock import RepositoryLock


@dataclass
class BuildComponents:
    """Everything one build of one branch needs"""
    git_runner: GitRunner
    config_handler: ConfigHandler
    command_runner: CommandRunner
    jekyll_helper: JekyllCommandHelper
    sync: S3Sync
    update_lock: RepositoryLock

    @classmethod
    def create(
        cls,
        config: GlobalConfig,
        options: BuilderOptions,
        branch: str,
        s3_client,
        build_logger
    ) -> 'BuildComponents':
        command_runner = CommandRunner(options.site_path, build_logger)
        return cls(
            git_runner=GitRunner(options, command_runner, build_logger),
            config_handler=ConfigHandler(
                options, branch, RepoFileHandler(options.site_path), build_logger
            ),
            command_runner=command_runner,
            jekyll_helper=JekyllCommandHelper(command_runner),
            sync=S3Sync(config.s3, config.home, s3_client, build_logger),
            update_lock=RepositoryLock(
                options.repo_dir,
                options.repo_name,
                branch,
                poll_interval=config.lock.poll_interval,
                timeout=config.lock.timeout
            )
        )
