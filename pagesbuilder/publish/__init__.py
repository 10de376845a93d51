from .s3_sync import S3Sync, create_s3_client

__all__ = ['S3Sync', 'create_s3_client']
