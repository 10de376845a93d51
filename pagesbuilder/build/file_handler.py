"""
Async file access relative to a repository working copy.
"""
import asyncio
from pathlib import Path


class RepoFileHandler:
    """Reads, writes and removes files inside the working copy off the event loop"""

    def __init__(self, site_path: str):
        self.site_path = Path(site_path)

    def path(self, filename: str) -> Path:
        return self.site_path / filename

    async def exists(self, filename: str) -> bool:
        return await asyncio.to_thread(self.path(filename).exists)

    async def read_file(self, filename: str) -> str:
        return await asyncio.to_thread(self.path(filename).read_text, encoding='utf-8')

    async def write_file(self, filename: str, content: str) -> None:
        await asyncio.to_thread(self.path(filename).write_text, content, encoding='utf-8')

    async def unlink(self, filename: str) -> None:
        await asyncio.to_thread(self.path(filename).unlink)
