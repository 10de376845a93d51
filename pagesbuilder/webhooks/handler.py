"""
Matches parsed webhooks against the configured builders and launches builds.
"""
import asyncio
import json
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Pattern

from ..build.site_builder import launch_builder
from ..config.global_config_loader import GlobalConfig, BuilderConfig
from ..core.exceptions import ConfigurationError
from ..core.models import WebhookEvent
from . import bitbucket, github

logger = logging.getLogger(__name__)

Parser = Callable[[Dict[str, Any]], Optional[WebhookEvent]]
Launcher = Callable[[WebhookEvent, str, BuilderConfig, GlobalConfig], Awaitable[None]]
Builder = Callable[[WebhookEvent], Awaitable[None]]

PARSERS: Dict[str, Parser] = {
    'github': github.parse,
    'bitbucket': bitbucket.parse,
}


def collection_from_git_url_prefix(git_url_prefix: str) -> str:
    """
    Parse the collection (user, organization or project) from a clone URL prefix.

    'git@github.com:18F/' -> '18f'
    """
    return re.split(r'[:/]', git_url_prefix.rstrip('/'))[-1].lower()


def branch_regexp(builder_config: BuilderConfig) -> Pattern:
    """Regexp matching the refs built by `builder_config`; group 1 is the branch"""
    branch_pattern = builder_config.branch_in_url_pattern or builder_config.branch
    return re.compile(f"refs/heads/({branch_pattern})$")


def get_parser(webhook_type: Optional[str]) -> Parser:
    """Return the parser for `webhook_type` (case-insensitive, default github)"""
    try:
        return PARSERS[(webhook_type or 'github').lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown webhookType: {webhook_type}") from None


def create_builder(
    config: GlobalConfig,
    builder_config: BuilderConfig,
    launcher: Optional[Launcher] = None
) -> Builder:
    """
    Return a coroutine function that builds events matching `builder_config`.

    Events for other branches or collections are ignored.
    """
    launcher = launcher or launch_builder
    collection = collection_from_git_url_prefix(
        builder_config.git_url_prefix or config.git_url_prefix
    )
    ref_regexp = branch_regexp(builder_config)

    async def builder(event: WebhookEvent) -> None:
        match = ref_regexp.search(event.branch)
        if match and (event.collection or '').lower() == collection:
            await launcher(event, match.group(1), builder_config, config)

    return builder


class WebhookHandler:
    """Parses incoming webhooks and runs every matching builder"""

    def __init__(self, config: GlobalConfig, launcher: Optional[Launcher] = None):
        self.parser = get_parser(config.webhook_type)
        self.builders: List[Builder] = [
            create_builder(config, builder_config, launcher)
            for builder_config in config.builders
        ]

    def parse(self, hook: Any) -> Optional[WebhookEvent]:
        """Return the normalized event, or None if `hook` is not a valid push"""
        logger.debug(f"INCOMING: {json.dumps(hook, indent=2, default=str)}")
        try:
            event = self.parser(hook)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"PARSE ERROR: {e!r}")
            return None

        if event is not None:
            logger.debug(f"PARSED: {json.dumps(event.to_dict(), indent=2)}")
        return event

    async def run_builders(self, event: WebhookEvent) -> List[BaseException]:
        """
        Run all builders concurrently and wait for them to settle.

        Returns the errors of the builds that failed; each is logged here.
        """
        results = await asyncio.gather(
            *(builder(event) for builder in self.builders),
            return_exceptions=True
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        for failure in failures:
            logger.error(f"{event.repository}: build for {event.branch} failed: {failure}")
        return failures
