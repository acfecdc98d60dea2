"""Tests for manifest loading."""

import pytest

from siteimg.config.loader import load_manifest, load_yaml
from siteimg.types import ImageFormat


@pytest.fixture
def manifest_yaml(tmp_path):
    content = """
images:
  - src: /images/hero.png
    preset: hero
  - src: https://cdn.example.com/a.jpg
  - src: /images/card.png
    width: 400
    height: 225
    format: avif
    quality: 60
"""
    path = tmp_path / "images.yaml"
    path.write_text(content)
    return path


class TestLoadManifest:
    def test_loads_entries(self, manifest_yaml):
        manifest = load_manifest(manifest_yaml)
        assert len(manifest.images) == 3
        assert manifest.images[0].preset == "hero"
        assert manifest.images[1].width is None
        assert manifest.images[2].format == ImageFormat.AVIF
        assert manifest.images[2].quality == 60

    def test_missing_images_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("pictures: []\n")
        with pytest.raises(ValueError, match="images"):
            load_manifest(path)

    def test_invalid_format_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("images:\n  - src: /a.png\n    format: bmp\n")
        with pytest.raises(ValueError):
            load_manifest(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_manifest(tmp_path / "nonexistent.yaml")


class TestLoadYaml:
    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="Expected YAML mapping"):
            load_yaml(path)

    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "ok.yaml"
        path.write_text("a: 1\n")
        assert load_yaml(path) == {"a": 1}
