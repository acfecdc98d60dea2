"""Configuration from package defaults, YAML files and the environment."""

from siteimg.config.hierarchy import load_config_hierarchy
from siteimg.config.loader import load_manifest
from siteimg.config.schema import Manifest, ManifestEntry, Settings, build_settings

__all__ = [
    "Manifest",
    "ManifestEntry",
    "Settings",
    "build_settings",
    "load_config_hierarchy",
    "load_manifest",
]
