"""
Publishes built sites to an S3 bucket.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import List

import boto3

from ..config.global_config_loader import S3Config
from ..core.exceptions import PublishError


def create_s3_client(s3_config: S3Config):
    """Create an S3 client; credentials come from the standard AWS environment"""
    return boto3.client(
        's3',
        region_name=s3_config.region,
        endpoint_url=s3_config.endpoint_url
    )


class S3Sync:
    """Uploads a destination directory under a key prefix mirroring its path below home"""

    def __init__(self, s3_config: S3Config, home: str, s3_client, build_logger):
        self.bucket = s3_config.bucket
        self.home = home
        self.s3_client = s3_client
        self.build_logger = build_logger
        self.logger = logging.getLogger(__name__)

    def key_prefix(self, destination: str) -> str:
        return Path(os.path.relpath(destination, self.home)).as_posix()

    async def sync(self, destination: str) -> None:
        """
        Upload every file below `destination`.

        Raises:
            PublishError: If the directory is missing or an upload fails
        """
        prefix = self.key_prefix(destination)
        self.build_logger.log(f"syncing to s3://{self.bucket}/{prefix}")

        try:
            uploaded = await asyncio.to_thread(self._upload_dir, destination, prefix)
        except PublishError:
            raise
        except Exception as e:
            raise PublishError(destination, str(e)) from e

        self.logger.debug(f"Uploaded {uploaded} files to s3://{self.bucket}/{prefix}")

    def _upload_dir(self, destination: str, prefix: str) -> int:
        root = Path(destination)
        if not root.is_dir():
            raise PublishError(destination, "destination directory does not exist")

        files: List[Path] = sorted(p for p in root.rglob('*') if p.is_file())
        for file_path in files:
            key = f"{prefix}/{file_path.relative_to(root).as_posix()}"
            self.s3_client.upload_file(str(file_path), self.bucket, key)
        return len(files)
