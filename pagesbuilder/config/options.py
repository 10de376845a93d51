"""
Per-build options derived from a webhook event and the builder configuration.
"""
import os
from typing import Optional

from ..core.models import WebhookEvent
from .global_config_loader import GlobalConfig, BuilderConfig


class BuilderOptions:
    """
    Paths and file names for rebuilding one repository.

    Values from the builder configuration override the global ones.

    Attributes:
        repo_dir: directory holding cloned repositories
        repo_name: repository being rebuilt
        site_path: working copy of the repository
        dest_dir: public destination root
        internal_dest_dir: internal destination root, if configured
        git_url_prefix: clone URL prefix, always ending with '/'
        pages_config: name of the generated descriptor file
        pages_yaml: name of the pages metadata file
        branch_in_url_pattern: pattern of branches published under their own URL
    """

    def __init__(self, event: WebhookEvent, config: GlobalConfig, builder_config: BuilderConfig):
        self.repo_dir = os.path.join(config.home, builder_config.repository_dir)
        self.repo_name = event.repository
        self.site_path = os.path.join(self.repo_dir, event.repository)
        self.dest_dir = os.path.join(config.home, builder_config.generated_site_dir)

        self.internal_dest_dir: Optional[str] = None
        if builder_config.internal_site_dir:
            self.internal_dest_dir = os.path.join(config.home, builder_config.internal_site_dir)

        git_url_prefix = builder_config.git_url_prefix or config.git_url_prefix
        if not git_url_prefix.endswith('/'):
            git_url_prefix += '/'
        self.git_url_prefix = git_url_prefix

        self.pages_config = builder_config.pages_config or config.pages_config
        self.pages_yaml = builder_config.pages_yaml or config.pages_yaml
        self.branch_in_url_pattern = builder_config.branch_in_url_pattern

    @property
    def branch_in_url(self) -> bool:
        """Whether the branch name is part of the published URL"""
        return bool(self.branch_in_url_pattern)

    @property
    def git_url(self) -> str:
        return f"{self.git_url_prefix}{self.repo_name}.git"
