"""
Resolves the build mode and destinations of a site from the files in its repository.
"""
import asyncio
import os
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

import yaml

from ..config.options import BuilderOptions
from ..core.exceptions import ConfigurationError
from ..core.models import BuildTarget, ResolvedConfiguration
from .file_handler import RepoFileHandler


JEKYLL_CONFIG = '_config.yml'
GEMFILE = 'Gemfile'
INTERNAL_CONFIG = '_config_internal.yml'
EXTERNAL_CONFIG = '_config_external.yml'

# Keys of the pages metadata file merged into the resolved configuration
PAGES_YAML_KEYS = ('baseurl',)

# Base URLs that leave the default destinations in place
NO_REMAP_BASEURLS = ('', '/')

BASEURL_LINE = re.compile(r'^baseurl:(.+)$', re.MULTILINE)


class ConfigHandler:
    """
    Inspects a working copy for marker files, computes the build destinations
    and owns the lifecycle of the generated descriptor (pages config) file.
    """

    def __init__(self, options: BuilderOptions, branch: str, file_handler: RepoFileHandler, build_logger):
        self.pages_config = options.pages_config
        self.pages_yaml = options.pages_yaml
        self.repo_name = options.repo_name
        self.dest_dir = options.dest_dir
        self.internal_dest_dir = options.internal_dest_dir
        self.branch_in_url = options.branch_in_url
        self.branch = branch
        self.file_handler = file_handler
        self.build_logger = build_logger

        internal_build_destination = None
        if self.internal_dest_dir:
            internal_build_destination = os.path.join(self.internal_dest_dir, self.repo_name)

        self.resolved = ResolvedConfiguration(
            build_destination=os.path.join(self.dest_dir, self.repo_name),
            internal_build_destination=internal_build_destination
        )

    @property
    def uses_jekyll(self) -> bool:
        return self.resolved.uses_jekyll

    @property
    def uses_bundler(self) -> bool:
        return self.resolved.uses_bundler

    @property
    def build_destination(self) -> str:
        return self.resolved.build_destination

    @property
    def public_destination(self) -> str:
        """Public destination including the branch segment when branches get their own URL"""
        if self.branch_in_url:
            return os.path.join(self.resolved.build_destination, self.branch)
        return self.resolved.build_destination

    async def init(self) -> None:
        """
        Probe the working copy and load the pages metadata file.

        Raises:
            ConfigurationError: If the overlay files don't match the builder
                configuration, or the metadata is invalid
        """
        attributes_to_files: Dict[str, Optional[str]] = {
            'has_pages_yaml': self.pages_yaml,
            'uses_jekyll': JEKYLL_CONFIG,
            'uses_bundler': GEMFILE,
            'has_internal_config': INTERNAL_CONFIG,
            'has_external_config': EXTERNAL_CONFIG,
        }

        await asyncio.gather(*(
            self._set_attribute_based_on_file_presence(attribute, filename)
            for attribute, filename in attributes_to_files.items()
        ))
        await asyncio.gather(
            self._check_internal_publishing_configuration(),
            self._load_pages_yaml_attributes()
        )

    async def _set_attribute_based_on_file_presence(self, attribute: str, filename: Optional[str]) -> None:
        if not filename:
            self.build_logger.log(f"missing file configuration for property: {attribute}")
            return
        setattr(self.resolved, attribute, await self.file_handler.exists(filename))

    async def _check_internal_publishing_configuration(self) -> None:
        if self.resolved.has_internal_config and not self.internal_dest_dir:
            raise ConfigurationError(
                f"failed to build a site with a {INTERNAL_CONFIG} file "
                "without an internalSiteDir defined in the builder configuration"
            )
        if self.resolved.has_external_config and not self.resolved.has_internal_config:
            raise ConfigurationError(
                f"failed to build a site with a {EXTERNAL_CONFIG} file "
                f"without a corresponding {INTERNAL_CONFIG} file"
            )

    async def _load_pages_yaml_attributes(self) -> None:
        if not self.resolved.has_pages_yaml:
            return

        contents = await self.file_handler.read_file(self.pages_yaml)
        try:
            attributes = yaml.safe_load(contents)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"failed to parse {self.pages_yaml}: {e}") from e

        if attributes is None:
            attributes = {}
        if not isinstance(attributes, dict):
            raise ConfigurationError(f"{self.pages_yaml} must contain a mapping of settings")

        self._assign_pages_yaml_attributes(attributes)

    def _assign_pages_yaml_attributes(self, attributes: Dict) -> None:
        for key in attributes:
            if key not in PAGES_YAML_KEYS:
                self.build_logger.log(f"ignoring unrecognized {self.pages_yaml} setting: {key}")

        if 'baseurl' not in attributes:
            return

        baseurl = attributes['baseurl']
        baseurl = '' if baseurl is None else str(baseurl)
        if baseurl not in NO_REMAP_BASEURLS:
            self._set_build_destination_from_baseurl(baseurl)
        self.resolved.baseurl = baseurl

    def _set_build_destination_from_baseurl(self, baseurl: str) -> None:
        build_destination = self._destination_under(self.dest_dir, baseurl)
        internal_build_destination = None
        if self.internal_dest_dir:
            internal_build_destination = self._destination_under(self.internal_dest_dir, baseurl)

        self.resolved.build_destination = build_destination
        if internal_build_destination:
            self.resolved.internal_build_destination = internal_build_destination

    @staticmethod
    def _destination_under(root: str, baseurl: str) -> str:
        root = os.path.normpath(root)
        destination = os.path.normpath(os.path.join(root, baseurl.lstrip('/')))

        # Must stay strictly below the destination root
        if not destination.startswith(os.path.join(root, '')):
            raise ConfigurationError(f"baseurl contains relative components: {baseurl}")
        return destination

    async def read_or_write_config(self) -> None:
        """Read the baseurl from an existing descriptor, or generate one"""
        if await self.file_handler.exists(self.pages_config):
            await self._read_config()
        else:
            await self._write_config()

    async def _read_config(self) -> None:
        self.build_logger.log('using existing', self.pages_config)
        data = await self.file_handler.read_file(self.pages_config)
        self.parse_destination_from_config_data(data)

    async def _write_config(self) -> None:
        self.build_logger.log('generating', self.pages_config)

        baseurl = self.resolved.baseurl
        if baseurl is None:
            baseurl = f"/{self.repo_name}"
        if self.branch_in_url:
            baseurl = f"{baseurl}/{self.branch}"

        await self.file_handler.write_file(self.pages_config, f"baseurl: {baseurl}\n")
        self.resolved.generated_config = True

    def parse_destination_from_config_data(self, config_data: str) -> None:
        """Remap the destinations from the `baseurl:` line of a descriptor"""
        match = BASEURL_LINE.search(config_data)
        if match is None:
            return

        baseurl = match.group(1).strip()
        if baseurl not in NO_REMAP_BASEURLS:
            self._set_build_destination_from_baseurl(baseurl)
        self.resolved.baseurl = baseurl

    def build_configurations(self) -> List[BuildTarget]:
        """Build targets in build order: internal first, then public"""
        base_configs = [JEKYLL_CONFIG]
        targets = []

        if self.resolved.has_internal_config:
            targets.append(BuildTarget(
                destination=self.resolved.internal_build_destination,
                configurations=base_configs + [INTERNAL_CONFIG, self.pages_config]
            ))

        if self.resolved.has_external_config:
            public_configs = base_configs + [EXTERNAL_CONFIG, self.pages_config]
        else:
            public_configs = base_configs + [self.pages_config]
        targets.append(BuildTarget(
            destination=self.resolved.build_destination,
            configurations=public_configs
        ))

        if self.branch_in_url:
            for target in targets:
                target.destination = os.path.join(target.destination, self.branch)
        return targets

    async def remove_generated_config(self, prior_error: Optional[BaseException] = None) -> None:
        """
        Delete the descriptor if this build generated it, then re-raise `prior_error`.

        A failed deletion is raised in place of `prior_error`.
        """
        if self.resolved.generated_config:
            self.build_logger.log('removing generated', self.pages_config)
            try:
                await self.file_handler.unlink(self.pages_config)
            except OSError as e:
                self.build_logger.error(f"failed to remove generated {self.pages_config}: {e}")
                raise
            self.resolved.generated_config = False

        if prior_error is not None:
            raise prior_error

    @asynccontextmanager
    async def pages_config_scope(self) -> AsyncIterator[List[BuildTarget]]:
        """
        Hold the descriptor for the duration of a generator run.

        Yields the build targets; the descriptor is removed on exit if this
        build generated it.
        """
        try:
            await self.read_or_write_config()
            yield self.build_configurations()
        finally:
            await self.remove_generated_config()
