"""
Command line entry points: run the webhook server or rebuild a site by hand.
"""
import asyncio
import getpass
import logging
import sys
from datetime import datetime
from typing import Optional, Tuple

import click
import uvicorn

from ..build.site_builder import launch_builder
from ..config.global_config_loader import GlobalConfig, BuilderConfig, load_global_config
from ..core.models import CommitInfo, Person, WebhookEvent
from ..webhooks.handler import branch_regexp, collection_from_git_url_prefix


def setup_logging(log_level: str):
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def find_builder(
    config: GlobalConfig, branch: str, builder_index: Optional[int]
) -> Tuple[BuilderConfig, str]:
    """
    Pick the builder by index, or the first one a push to `branch` would launch.

    Returns the builder and the branch name it builds, matched the same way
    as webhook pushes.
    """
    if builder_index is not None:
        try:
            return config.builders[builder_index], branch
        except IndexError:
            raise click.ClickException(f"No builder at index {builder_index}")

    ref = f"refs/heads/{branch}"
    for builder_config in config.builders:
        match = branch_regexp(builder_config).search(ref)
        if match:
            return builder_config, match.group(1)
    raise click.ClickException(f"No builder configured for branch {branch}")


@click.group()
def cli():
    """Build and publish static sites from repository pushes"""
    pass


@cli.command()
@click.option('--config', 'config_path', default=None, help='Path to pages config YAML')
@click.option('--host', default=None, help='Interface to bind (overrides config)')
@click.option('--port', default=None, type=int, help='Port to listen on (overrides config)')
@click.option('--log-level', default='INFO', help='Log level')
def serve(config_path: Optional[str], host: Optional[str], port: Optional[int], log_level: str):
    """Run the webhook server"""
    setup_logging(log_level)

    from ..api.main import create_app

    config = load_global_config(config_path)
    app = create_app(config)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=log_level.lower()
    )


@cli.command()
@click.option('--config', 'config_path', default=None, help='Path to pages config YAML')
@click.option('--repository', required=True, help='Repository to rebuild')
@click.option('--branch', required=True, help='Branch to rebuild')
@click.option('--builder-index', default=None, type=int, help='Builder to use (default: first matching)')
@click.option('--log-level', default='INFO', help='Log level')
def build(config_path: Optional[str], repository: str, branch: str, builder_index: Optional[int], log_level: str):
    """Rebuild and publish one site without a webhook"""
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    config = load_global_config(config_path)
    builder_config, build_branch = find_builder(config, branch, builder_index)
    user = getpass.getuser()

    event = WebhookEvent(
        branch=f"refs/heads/{branch}",
        collection=collection_from_git_url_prefix(
            builder_config.git_url_prefix or config.git_url_prefix
        ),
        repository=repository,
        commit=CommitInfo(
            id=f"origin/{branch}",
            message="manual rebuild",
            timestamp=datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        ),
        author=Person(name=user, email=""),
        pusher=Person(name=user, email="")
    )

    try:
        asyncio.run(launch_builder(event, build_branch, builder_config, config))
    except Exception as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)

    click.echo(f"{repository}: build successful")


if __name__ == '__main__':
    cli()
