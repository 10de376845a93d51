"""
Parses Bitbucket Server POST service webhooks into the common event format.
https://confluence.atlassian.com/bitbucketserver/post-service-webhook-for-bitbucket-server-776640367.html
"""
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.models import CommitInfo, Person, WebhookEvent


def parse(hook: Dict[str, Any]) -> Optional[WebhookEvent]:
    """Return the push event, or None if `hook` is incomplete or paginated"""
    ref_changes = hook.get('refChanges')
    repository = hook.get('repository')
    changesets = hook.get('changesets')

    if None in (ref_changes, repository, changesets) or not changesets.get('isLastPage'):
        return None

    commit = changesets['values'][0]['toCommit']
    # authorTimestamp is in milliseconds
    timestamp = datetime.fromtimestamp(commit['authorTimestamp'] / 1000)

    return WebhookEvent(
        branch=ref_changes[0]['refId'],
        collection=repository['project']['key'].lower(),
        repository=repository['slug'],
        commit=CommitInfo(
            id=commit['id'],
            message=commit['message'],
            timestamp=timestamp.strftime('%Y-%m-%d %H:%M:%S')
        ),
        author=Person(
            name=commit['author']['name'],
            email=commit['author']['emailAddress']
        )
    )
