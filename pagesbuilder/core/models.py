"""
Models shared across the webhook, config and build layers.
"""
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any


@dataclass
class Person:
    """Author, committer or pusher of a change"""
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} {self.email}"


@dataclass
class CommitInfo:
    """Head commit of a push"""
    id: str
    message: str
    timestamp: str


@dataclass
class WebhookEvent:
    """Normalized push notification produced by a webhook parser"""
    branch: str
    collection: str
    repository: str
    commit: CommitInfo
    author: Person
    committer: Optional[Person] = None
    pusher: Optional[Person] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)


@dataclass
class BuildTarget:
    """A destination directory and the ordered config files used to build it"""
    destination: str
    configurations: List[str] = field(default_factory=list)

    @property
    def config_arg(self) -> str:
        """Value for the generator's --config argument"""
        return ','.join(self.configurations)


@dataclass
class ResolvedConfiguration:
    """
    Build mode and destinations derived from the files present in a repository.

    Only ConfigHandler mutates this while it initializes.
    """
    build_destination: str
    internal_build_destination: Optional[str] = None
    has_pages_yaml: bool = False
    uses_jekyll: bool = False
    uses_bundler: bool = False
    has_internal_config: bool = False
    has_external_config: bool = False
    baseurl: Optional[str] = None
    generated_config: bool = False
