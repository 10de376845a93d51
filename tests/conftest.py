"""Pytest configuration and fixtures for Pages Builder tests."""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pagesbuilder.build.build_logger import BuildLogger
from pagesbuilder.build.config_handler import ConfigHandler
from pagesbuilder.build.file_handler import RepoFileHandler
from pagesbuilder.config.global_config_loader import (
    GlobalConfig, BuilderConfig, S3Config, LockConfig
)
from pagesbuilder.config.options import BuilderOptions
from pagesbuilder.core.models import CommitInfo, Person, WebhookEvent

# Configure logging
logging.basicConfig(level=logging.INFO)


@pytest.fixture
def global_config(tmp_path) -> GlobalConfig:
    """Global configuration rooted in a temporary home directory."""
    return GlobalConfig(
        home=str(tmp_path),
        git_url_prefix='git@github.com:mbland/',
        pages_config='_config_pages.yml',
        pages_yaml='.pages.yml',
        bundler_cache_dir='bundler_cache_dir',
        s3=S3Config(bucket='pages.example.com'),
        lock=LockConfig(poll_interval=0.01)
    )


@pytest.fixture
def builder_config() -> BuilderConfig:
    """Builder for the `pages` branch."""
    return BuilderConfig(
        branch='pages',
        repository_dir='repo_dir',
        generated_site_dir='dest_dir'
    )


@pytest.fixture
def push_event() -> WebhookEvent:
    """Parsed push to the `pages` branch of repo_name."""
    mbland = Person(name='mbland', email='mbland@acm.org')
    return WebhookEvent(
        branch='refs/heads/pages',
        collection='mbland',
        repository='repo_name',
        commit=CommitInfo(
            id='deadbeef',
            message='Build me',
            timestamp='2017-10-29 16:37:01'
        ),
        author=mbland,
        committer=mbland,
        pusher=mbland
    )


@pytest.fixture
def make_options(push_event, global_config, builder_config) -> Callable[..., BuilderOptions]:
    """Create BuilderOptions, optionally overriding builder settings."""
    def _make(**overrides) -> BuilderOptions:
        config = BuilderConfig(**{**builder_config.__dict__, **overrides})
        return BuilderOptions(push_event, global_config, config)
    return _make


@pytest.fixture
def make_config_handler() -> Callable[..., ConfigHandler]:
    """Create a ConfigHandler over the options' (created) working copy."""
    def _make(options: BuilderOptions, branch: str = 'pages',
              logger: Optional[BuildLogger] = None) -> ConfigHandler:
        Path(options.site_path).mkdir(parents=True, exist_ok=True)
        return ConfigHandler(
            options, branch, RepoFileHandler(options.site_path), logger or BuildLogger()
        )
    return _make


def write_site_file(options: BuilderOptions, filename: str, contents: str = '') -> Path:
    """Write a file into the options' working copy."""
    path = Path(options.site_path) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents)
    return path
