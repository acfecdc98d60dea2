"""YAML manifest loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from siteimg.config.schema import Manifest


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load any YAML file safely."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Expected YAML mapping, got {type(raw).__name__} in {path}")

    return raw


def load_manifest(path: str | Path) -> Manifest:
    """Load a batch manifest and return a validated Manifest."""
    raw = load_yaml(path)
    if "images" not in raw:
        raise ValueError(f"Invalid manifest: missing top-level 'images' key in {path}")
    return Manifest(**raw)
