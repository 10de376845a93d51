"""
Parses GitHub push webhooks into the common event format.
https://docs.github.com/webhooks/webhook-events-and-payloads#push
"""
from typing import Any, Dict, Optional

from ..core.models import CommitInfo, Person, WebhookEvent


def _person(data: Dict[str, Any]) -> Person:
    return Person(name=data.get('name'), email=data.get('email'))


def _collection(repository: Dict[str, Any]) -> Optional[str]:
    # Organization pushes carry `organization`; user repositories only an owner
    if repository.get('organization'):
        return repository['organization']
    owner = repository.get('owner') or {}
    return owner.get('login') or owner.get('name')


def parse(hook: Dict[str, Any]) -> Optional[WebhookEvent]:
    """Return the push event, or None if `hook` is not a push"""
    branch = hook.get('ref')
    repository = hook.get('repository')
    commit = hook.get('head_commit')
    pusher = hook.get('pusher')

    if None in (branch, repository, commit, pusher):
        return None

    return WebhookEvent(
        branch=branch,
        collection=_collection(repository),
        repository=repository['name'],
        commit=CommitInfo(
            id=commit['id'],
            message=commit['message'],
            timestamp=commit['timestamp']
        ),
        author=_person(commit['author']),
        committer=_person(commit['committer']) if commit.get('committer') else None,
        pusher=_person(pusher)
    )
