"""Test cases for the webhook server and command line."""

from unittest.mock import AsyncMock, patch

import click
import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from pagesbuilder.api.main import create_app
from pagesbuilder.cli.server_cli import cli, find_builder
from pagesbuilder.config.global_config_loader import BuilderConfig
from pagesbuilder.webhooks.handler import create_builder

from test_webhooks import github_push


class TestWebhookServer:
    """Test the webhook receiver endpoints"""

    @pytest.fixture
    def launched(self):
        return []

    @pytest.fixture
    def client(self, global_config, builder_config, launched):
        global_config.builders = [builder_config]

        async def launcher(event, branch, builder_config, config):
            launched.append((event.repository, branch))

        with TestClient(create_app(global_config, launcher)) as client:
            yield client

    def test_accepts_push(self, client, launched):
        """Test that a valid push is accepted and built after the response"""
        response = client.post('/', json=github_push())

        assert response.status_code == 202
        assert response.json() == {
            'status': 'accepted',
            'repository': 'repo_name',
            'branch': 'refs/heads/pages'
        }
        assert launched == [('repo_name', 'pages')]

    def test_accepts_push_for_unbuilt_branch(self, client, launched):
        response = client.post('/', json=github_push(ref='refs/heads/main'))

        assert response.status_code == 202
        assert launched == []

    def test_rejects_non_push(self, client, launched):
        response = client.post('/', json={'zen': 'Keep it logically awesome.'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'Not a valid push event'
        assert launched == []

    def test_rejects_invalid_json(self, client):
        response = client.post('/', content='{not json',
                               headers={'content-type': 'application/json'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'Payload is not valid JSON'

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json() == {'status': 'ok'}


class TestBuildCommand:
    """Test rebuilding a site from the command line"""

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / 'pages_config.yaml'
        path.write_text(
            f"home: {tmp_path}\n"
            "git_url_prefix: git@github.com:mbland/\n"
            "builders:\n"
            "  - branch: pages\n"
            "    repository_dir: repo_dir\n"
            "    generated_site_dir: dest_dir\n"
            "  - branch: pages-staging\n"
            "    repository_dir: repo_dir_staging\n"
            "    generated_site_dir: staging_dir\n"
        )
        return str(path)

    def test_builds_matching_builder(self, config_file):
        with patch('pagesbuilder.cli.server_cli.launch_builder', new_callable=AsyncMock) as launch, \
                patch('pagesbuilder.cli.server_cli.getpass.getuser', return_value='mbland'):
            result = CliRunner().invoke(cli, [
                'build', '--config', config_file,
                '--repository', 'repo_name', '--branch', 'pages-staging'
            ])

        assert result.exit_code == 0, result.output
        assert 'repo_name: build successful' in result.output

        event, branch, builder_config, config = launch.await_args.args
        assert event.branch == 'refs/heads/pages-staging'
        assert event.collection == 'mbland'
        assert event.commit.id == 'origin/pages-staging'
        assert str(event.pusher) == 'mbland '
        assert branch == 'pages-staging'
        assert builder_config == BuilderConfig(
            branch='pages-staging', repository_dir='repo_dir_staging', generated_site_dir='staging_dir'
        )

    def test_build_failure_exits_non_zero(self, config_file):
        with patch('pagesbuilder.cli.server_cli.launch_builder',
                   new_callable=AsyncMock, side_effect=RuntimeError('jekyll failed')), \
                patch('pagesbuilder.cli.server_cli.getpass.getuser', return_value='mbland'):
            result = CliRunner().invoke(cli, [
                'build', '--config', config_file,
                '--repository', 'repo_name', '--branch', 'pages'
            ])

        assert result.exit_code == 1

    def test_unknown_branch(self, config_file):
        result = CliRunner().invoke(cli, [
            'build', '--config', config_file,
            '--repository', 'repo_name', '--branch', 'main'
        ])

        assert result.exit_code != 0
        assert 'No builder configured for branch main' in result.output


class TestFindBuilder:
    """Test that manual rebuilds pick the builder a push would launch"""

    @pytest.fixture
    def pattern_config(self, global_config, builder_config):
        global_config.builders = [
            BuilderConfig(branch='pages', repository_dir='repo_dir',
                          generated_site_dir='versions_dir', branch_in_url_pattern='v[0-9]+'),
            builder_config,
        ]
        return global_config

    @pytest.mark.asyncio
    @pytest.mark.parametrize('branch', ['v2', 'pages', 'release/refs/heads/v3'])
    async def test_matches_webhook_dispatch(self, pattern_config, push_event, branch):
        launcher = AsyncMock()
        push_event.branch = f"refs/heads/{branch}"
        for builder_config in pattern_config.builders:
            await create_builder(pattern_config, builder_config, launcher)(push_event)

        builder_config, build_branch = find_builder(pattern_config, branch, None)

        first_launch = launcher.await_args_list[0].args
        assert (builder_config, build_branch) == (first_launch[2], first_launch[1])

    def test_unmatched_branch(self, pattern_config):
        with pytest.raises(click.ClickException, match='No builder configured for branch v2-docs'):
            find_builder(pattern_config, 'v2-docs', None)

    def test_builder_index(self, pattern_config):
        builder_config, build_branch = find_builder(pattern_config, 'anything', 1)

        assert builder_config.generated_site_dir == 'dest_dir'
        assert build_branch == 'anything'
