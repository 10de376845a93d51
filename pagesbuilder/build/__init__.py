"""
Build system for published sites.
Resolves the build mode, runs the generator or copy, and publishes the result.
"""

from .build_logger import BuildLogger
from .file_handler import RepoFileHandler
from .config_handler import ConfigHandler
from .jekyll_helper import JekyllCommandHelper
from .lock import RepositoryLock
from .component_factory import BuildComponents
from .site_builder import SiteBuilder, launch_builder

__all__ = [
    'BuildLogger',
    'RepoFileHandler',
    'ConfigHandler',
    'JekyllCommandHelper',
    'RepositoryLock',
    'BuildComponents',
    'SiteBuilder',
    'launch_builder',
]
