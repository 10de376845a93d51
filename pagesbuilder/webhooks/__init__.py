from .handler import (
    WebhookHandler,
    branch_regexp,
    collection_from_git_url_prefix,
    create_builder,
    get_parser
)

__all__ = [
    'WebhookHandler',
    'branch_regexp',
    'collection_from_git_url_prefix',
    'create_builder',
    'get_parser',
]
