"""Tests for the render_spheres command-line configuration.

Tests cover:
- Defaults for the built-in scene
- Command-line options overriding a JSON render file
- JSON values kept when no option is given
"""

import json

import pytest


@pytest.fixture
def render_file(tmp_path):
    """A JSON render file with non-default image and settings."""
    from src.softpt.scene.builder import build_default_scene

    path = tmp_path / "render.json"
    path.write_text(
        json.dumps(
            {
                "scene": build_default_scene().to_dict(),
                "image": {"width": 32, "height": 16},
                "settings": {"samples_per_pixel": 8, "max_bounces": 3, "seed": 5},
            }
        )
    )
    return str(path)


class TestBuildConfig:
    """Tests for build_config()."""

    def test_builtin_scene_defaults(self):
        from examples.render_spheres import build_config, parse_args
        from src.softpt.config import BackgroundMode, RenderSettings

        config = build_config(parse_args([]))

        assert len(config.scene.spheres) == 8
        assert (config.image.width, config.image.height) == (256, 256)
        assert config.settings == RenderSettings()
        assert config.settings.background_mode == BackgroundMode.BLACK

    def test_builtin_scene_options(self):
        from examples.render_spheres import build_config, parse_args
        from src.softpt.config import BackgroundMode

        args = parse_args(["--width", "64", "--samples", "9", "--max-bounces", "2", "--sky", "--seed", "7"])
        config = build_config(args)

        assert (config.image.width, config.image.height) == (64, 256)
        assert config.settings.samples_per_pixel == 9
        assert config.settings.max_bounces == 2
        assert config.settings.background_mode == BackgroundMode.SKY_GRADIENT
        assert config.settings.seed == 7

    def test_scene_file_values_kept_without_options(self, render_file):
        from examples.render_spheres import build_config, parse_args
        from src.softpt.config import BackgroundMode

        config = build_config(parse_args(["--scene", render_file]))

        assert (config.image.width, config.image.height) == (32, 16)
        assert config.settings.samples_per_pixel == 8
        assert config.settings.max_bounces == 3
        assert config.settings.seed == 5
        assert config.settings.background_mode == BackgroundMode.BLACK

    def test_options_override_scene_file(self, render_file):
        """Test that explicit options win over the values in the render file."""
        from examples.render_spheres import build_config, parse_args
        from src.softpt.config import BackgroundMode

        args = parse_args(
            ["--scene", render_file, "--samples", "64", "--max-bounces", "4", "--seed", "11", "--sky", "--height", "24"]
        )
        config = build_config(args)

        assert (config.image.width, config.image.height) == (32, 24)
        assert config.settings.samples_per_pixel == 64
        assert config.settings.max_bounces == 4
        assert config.settings.seed == 11
        assert config.settings.background_mode == BackgroundMode.SKY_GRADIENT
        assert len(config.scene.spheres) == 8

    def test_invalid_override_rejected(self, render_file):
        from examples.render_spheres import build_config, parse_args

        with pytest.raises(ValueError, match="samples_per_pixel"):
            build_config(parse_args(["--scene", render_file, "--samples", "0"]))
