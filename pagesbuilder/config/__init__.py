from .global_config_loader import (
    GlobalConfig,
    BuilderConfig,
    ServerConfig,
    S3Config,
    LockConfig,
    load_global_config
)
from .options import BuilderOptions

__all__ = [
    'GlobalConfig',
    'BuilderConfig',
    'ServerConfig',
    'S3Config',
    'LockConfig',
    'load_global_config',
    'BuilderOptions',
]
