"""metro-monorepo core package.

Locates the workspace layout of a JavaScript monorepo and provides the layered
module resolver and watch-folder list a React Native bundler needs to build a
project that lives inside it.
"""

from .config import ConfigError, Settings, load_settings
from .finders import (
    DEFAULT_FINDERS,
    find_lerna_monorepo,
    find_pnpm_monorepo,
    find_yarn_monorepo,
    locate,
)
from .helper import (
    DEFAULT_TYPESCRIPT_CONFIG,
    HelperOptions,
    MetroConfigHelper,
    TypeScriptConfig,
    metro_config,
    metro_config_helper,
)
from .models import MonorepoInfo, PackageLocation, Resolution, ResolutionType, ResolverContext
from .resolver import LayeredResolver
from .watch_folders import compute_watch_folders

__all__ = [
    "ConfigError",
    "DEFAULT_FINDERS",
    "DEFAULT_TYPESCRIPT_CONFIG",
    "HelperOptions",
    "LayeredResolver",
    "MetroConfigHelper",
    "MonorepoInfo",
    "PackageLocation",
    "Resolution",
    "ResolutionType",
    "ResolverContext",
    "Settings",
    "TypeScriptConfig",
    "compute_watch_folders",
    "find_lerna_monorepo",
    "find_pnpm_monorepo",
    "find_yarn_monorepo",
    "load_settings",
    "locate",
    "metro_config",
    "metro_config_helper",
]
