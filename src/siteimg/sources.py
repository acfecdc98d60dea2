"""Image source classification and path validation."""

from __future__ import annotations

from dataclasses import dataclass

from siteimg.types import ImageMetadata

_REMOTE_PREFIXES = ("http://", "https://")
_RELATIVE_PREFIXES = ("./", "../")


@dataclass(frozen=True)
class RemoteUrl:
    """Absolute URL. Cannot be fetched and re-encoded at build time."""

    url: str

    @property
    def identifier(self) -> str:
        return self.url


@dataclass(frozen=True)
class LocalPath:
    """Path into the public folder or relative to the page."""

    path: str

    @property
    def identifier(self) -> str:
        return self.path


@dataclass(frozen=True)
class AssetHandle:
    """Imported asset with known intrinsic dimensions."""

    metadata: ImageMetadata

    @property
    def identifier(self) -> str:
        return self.metadata.src


ImageSource = RemoteUrl | LocalPath | AssetHandle


def is_remote(path: str) -> bool:
    return path.startswith(_REMOTE_PREFIXES)


def resolve_source(src: str | ImageMetadata) -> ImageSource:
    """Classify a raw request source into one of the source variants."""
    if isinstance(src, ImageMetadata):
        return AssetHandle(src)
    if is_remote(src):
        return RemoteUrl(src)
    return LocalPath(src)


def is_valid_image_path(path: str | None) -> bool:
    """Check that an image reference has a usable shape.

    Public folder files cannot be checked for existence cheaply during a
    build, so only the form of the path is validated: absolute URLs,
    site-absolute paths and explicit relative paths are accepted.
    """
    if not path:
        return False
    if is_remote(path):
        return True
    if path.startswith("/"):
        return True
    return path.startswith(_RELATIVE_PREFIXES)
