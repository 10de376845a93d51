from .exceptions import (
    PagesBuilderError,
    ConfigurationError,
    CommandError,
    RepoSyncError,
    PublishError
)
from .models import (
    Person,
    CommitInfo,
    WebhookEvent,
    BuildTarget,
    ResolvedConfiguration
)

__all__ = [
    'PagesBuilderError',
    'ConfigurationError',
    'CommandError',
    'RepoSyncError',
    'PublishError',
    'Person',
    'CommitInfo',
    'WebhookEvent',
    'BuildTarget',
    'ResolvedConfiguration',
]
