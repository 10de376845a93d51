"""
Exceptions raised by the site builder.
"""
from typing import List, Optional


class PagesBuilderError(Exception):
    """Base class for build failures"""


class ConfigurationError(PagesBuilderError, ValueError):
    """Invalid builder or site configuration"""


class CommandError(PagesBuilderError):
    """An external command exited with a non-zero status"""

    def __init__(self, command: str, args: List[str], exit_code: int, message: Optional[str] = None):
        self.command = command
        self.args_list = list(args)
        self.exit_code = exit_code
        super().__init__(
            message or f"{command} failed with exit code {exit_code} from command: {self.command_line}"
        )

    @property
    def command_line(self) -> str:
        return ' '.join([self.command] + self.args_list)


class RepoSyncError(CommandError):
    """Cloning or syncing the working copy failed"""

    def __init__(self, action: str, repo_name: str, error: CommandError):
        super().__init__(
            error.command,
            error.args_list,
            error.exit_code,
            f"failed to {action} {repo_name} with exit code {error.exit_code} "
            f"from command: {error.command_line}"
        )


class PublishError(PagesBuilderError):
    """Uploading a built destination failed"""

    def __init__(self, destination: str, reason: str):
        self.destination = destination
        super().__init__(f"failed to sync {destination}: {reason}")
