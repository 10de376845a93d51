"""
Pages Builder - builds and publishes static sites when repositories are pushed

Main modules:
- core: Shared models and exceptions
- config: Configuration loading and per-build options
- build: Configuration resolution, generator invocation, locking and orchestration
- utils: External command and git helpers
- publish: S3 publishing
- webhooks: Webhook parsing and builder dispatch
- api: Webhook receiver HTTP application
"""

from .core.models import WebhookEvent, BuildTarget, ResolvedConfiguration
from .config.global_config_loader import GlobalConfig, BuilderConfig, load_global_config
from .build.config_handler import ConfigHandler
from .build.site_builder import SiteBuilder, launch_builder
from .webhooks.handler import WebhookHandler

__version__ = "1.0.0"
__all__ = [
    'WebhookEvent',
    'BuildTarget',
    'ResolvedConfiguration',
    'GlobalConfig',
    'BuilderConfig',
    'load_global_config',
    'ConfigHandler',
    'SiteBuilder',
    'launch_builder',
    'WebhookHandler',
]
