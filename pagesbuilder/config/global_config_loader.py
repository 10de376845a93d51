import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field


DEFAULT_RSYNC_OPTS = [
    '-vaxp',
    '--delete',
    '--ignore-errors',
    '--exclude=.[A-Za-z0-9]*'
]


@dataclass
class ServerConfig:
    """Webhook server configuration"""
    host: str = "0.0.0.0"
    port: int = 5000


@dataclass
class S3Config:
    """Publishing bucket configuration"""
    bucket: str = ""
    region: Optional[str] = None
    endpoint_url: Optional[str] = None


@dataclass
class LockConfig:
    """Per-repository lock configuration"""
    poll_interval: float = 0.5
    timeout: Optional[float] = None  # None waits until the lock is free


@dataclass
class BuilderConfig:
    """Builder definition for one input branch"""
    branch: str
    repository_dir: str
    generated_site_dir: str
    internal_site_dir: Optional[str] = None
    branch_in_url_pattern: Optional[str] = None
    git_url_prefix: Optional[str] = None
    pages_config: Optional[str] = None
    pages_yaml: Optional[str] = None


@dataclass
class GlobalConfig:
    """Settings shared by every builder"""
    home: str
    git_url_prefix: str
    pages_config: str = "_config_pages.yml"
    pages_yaml: str = ".pages.yml"
    bundler_cache_dir: str = ".bundler_cache"
    rsync_opts: List[str] = field(default_factory=lambda: list(DEFAULT_RSYNC_OPTS))
    webhook_type: str = "github"
    server: ServerConfig = field(default_factory=ServerConfig)
    s3: S3Config = field(default_factory=S3Config)
    lock: LockConfig = field(default_factory=LockConfig)
    builders: List[BuilderConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlobalConfig':
        """Create GlobalConfig from dictionary"""
        defaults = cls.default()
        return cls(
            home=str(Path(data.get('home', defaults.home)).expanduser()),
            git_url_prefix=data.get('git_url_prefix', defaults.git_url_prefix),
            pages_config=data.get('pages_config', defaults.pages_config),
            pages_yaml=data.get('pages_yaml', defaults.pages_yaml),
            bundler_cache_dir=data.get('bundler_cache_dir', defaults.bundler_cache_dir),
            rsync_opts=list(data.get('rsync_opts', defaults.rsync_opts)),
            webhook_type=data.get('webhook_type', defaults.webhook_type),
            server=ServerConfig(**data.get('server', {})),
            s3=S3Config(**data.get('s3', {})),
            lock=LockConfig(**data.get('lock', {})),
            builders=[BuilderConfig(**builder) for builder in data.get('builders', [])]
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'GlobalConfig':
        """Load GlobalConfig from YAML file"""
        path = Path(yaml_path)
        if not path.exists():
            # Return default config if file doesn't exist
            return cls.default()

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def default(cls) -> 'GlobalConfig':
        """Return default configuration"""
        return cls(
            home=str(Path.home()),
            git_url_prefix="git@github.com:pages/"
        )


def load_global_config(config_path: Optional[str] = None) -> GlobalConfig:
    """
    Load configuration from a YAML file.
    If no path provided, looks for pages_config.yaml in standard locations.
    """
    if config_path:
        return GlobalConfig.from_yaml(config_path)

    # Try standard locations
    search_paths = [
        Path("./pages_config.yaml"),
        Path("./config/pages_config.yaml"),
        Path("/etc/pagesbuilder/pages_config.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return GlobalConfig.from_yaml(str(path))

    return GlobalConfig.default()
