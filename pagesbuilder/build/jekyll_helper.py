"""
Runs the site generator once per build target.
"""
from typing import List

from ..core.models import BuildTarget
from ..utils.command_runner import CommandRunner


class JekyllCommandHelper:
    """Invokes `jekyll build` (optionally through `bundle exec`) for each target"""

    BUILD_ARGS = ['build', '--trace', '--destination']

    def __init__(self, command_runner: CommandRunner):
        self.command_runner = command_runner

    async def build(self, build_targets: List[BuildTarget], bundler: bool = False) -> None:
        """
        Build each target in order; a failure skips the remaining targets.

        Raises:
            CommandError: If the generator exits non-zero
        """
        for target in build_targets:
            await self._run_build(target, bundler)

    async def _run_build(self, target: BuildTarget, bundler: bool) -> None:
        command = 'jekyll'
        args = self.BUILD_ARGS + [target.destination, '--config', target.config_arg]

        if bundler:
            command = 'bundle'
            args = ['exec', 'jekyll'] + args
        await self.command_runner.run(command, args)
