from .command_runner import CommandRunner
from .git_runner import GitRunner

__all__ = ['CommandRunner', 'GitRunner']
