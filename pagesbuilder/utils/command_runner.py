"""
Runs external commands without blocking the event loop.
"""
import asyncio
import logging
from typing import List, Optional

from ..core.exceptions import CommandError

# Output is read in chunks so lines of any length reach the build log
READ_CHUNK_SIZE = 64 * 1024


class CommandRunner:
    """Spawns commands and streams their output into the build log"""

    def __init__(self, cwd: str, build_logger):
        """
        Args:
            cwd: Default working directory, usually the repository working copy
            build_logger: BuildLogger receiving the command output
        """
        self.cwd = cwd
        self.build_logger = build_logger
        self.logger = logging.getLogger(__name__)

    async def run(self, command: str, args: List[str], cwd: Optional[str] = None) -> None:
        """
        Run a command to completion.

        Raises:
            CommandError: If the command exits with a non-zero status
        """
        workdir = cwd or self.cwd
        self.logger.debug(f"Running in {workdir}: {command} {' '.join(args)}")

        process = await asyncio.create_subprocess_exec(
            command, *args,
            cwd=workdir,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT
        )

        completed = False
        try:
            await self._stream_output(process.stdout)
            completed = True
        finally:
            if not completed and process.returncode is None:
                self.logger.warning(f"Killing {command} after its output could not be read")
                process.kill()
                await process.wait()

        exit_code = await process.wait()
        if exit_code != 0:
            raise CommandError(command, args, exit_code)

    async def _stream_output(self, stream: asyncio.StreamReader) -> None:
        pending = bytearray()
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            pending.extend(chunk)
            *lines, rest = pending.split(b'\n')
            pending = bytearray(rest)
            for line in lines:
                self._log_line(line)

        if pending:
            self._log_line(pending)

    def _log_line(self, line: bytes) -> None:
        self.build_logger.log(line.decode('utf-8', errors='replace').rstrip())
