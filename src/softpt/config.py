"""Render configuration.

Configuration is expressed as dataclasses with validation on construction:

    RenderSettings: estimator knobs (samples, bounce bound, background, seed)
    ImageConfig: output resolution
    CameraConfig: position, look-at target and up hint

A complete render description can also be read from a JSON file with the
sections "scene", "camera", "image" and "settings":

    {
        "scene": {"materials": [...], "spheres": [...]},
        "camera": {"position": [0, 0.5, -1], "target": [0, 0, 0], "up": [0, 1, 0]},
        "image": {"width": 256, "height": 256},
        "settings": {"samples_per_pixel": 64, "background_mode": "sky_gradient"}
    }

Sections other than "scene" are optional and fall back to the defaults below.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from src.softpt.core.vector import Vector3

if TYPE_CHECKING:
    from src.softpt.scene.scene import Scene

# Historical defaults: the interactive variant used 4 samples per pixel, the
# reference variant 1024
DEFAULT_SAMPLES_PER_PIXEL = 4
DEFAULT_MAX_BOUNCES = 6
DEFAULT_SKY_COLOR = (0.25, 0.55, 0.75)


class BackgroundMode(Enum):
    """Radiance returned by rays that escape the scene."""

    BLACK = "black"
    SKY_GRADIENT = "sky_gradient"


@dataclass(frozen=True)
class RenderSettings:
    """Estimator configuration shared by both backends.

    Attributes:
        samples_per_pixel: Number of independent paths averaged per pixel.
        max_bounces: Hard recursion bound; a path at this depth returns zero.
        background_mode: Radiance for rays that miss every sphere.
        sky_color: Top color of the sky gradient (bottom is black).
        seed: Optional seed making the reference renderer reproducible.
    """

    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_bounces: int = DEFAULT_MAX_BOUNCES
    background_mode: BackgroundMode = BackgroundMode.BLACK
    sky_color: Vector3 = field(default=Vector3(*DEFAULT_SKY_COLOR))
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_bounces < 1:
            raise ValueError(f"max_bounces must be positive, got {self.max_bounces}")
        if not isinstance(self.background_mode, BackgroundMode):
            raise ValueError(f"Unknown background mode: {self.background_mode}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderSettings:
        """Build settings from a plain dictionary (e.g. parsed JSON).

        Raises:
            ValueError: If a value is invalid or the background mode is unknown.
        """
        mode = data.get("background_mode", BackgroundMode.BLACK.value)
        try:
            background_mode = BackgroundMode(mode)
        except ValueError:
            raise ValueError(f"Unknown background mode: {mode}") from None
        return cls(
            samples_per_pixel=int(data.get("samples_per_pixel", DEFAULT_SAMPLES_PER_PIXEL)),
            max_bounces=int(data.get("max_bounces", DEFAULT_MAX_BOUNCES)),
            background_mode=background_mode,
            sky_color=Vector3.from_iterable(data.get("sky_color", DEFAULT_SKY_COLOR)),
            seed=data.get("seed"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "samples_per_pixel": self.samples_per_pixel,
            "max_bounces": self.max_bounces,
            "background_mode": self.background_mode.value,
            "sky_color": list(self.sky_color),
            "seed": self.seed,
        }


@dataclass(frozen=True)
class ImageConfig:
    """Output image resolution in pixels."""

    width: int = 1024
    height: int = 1024

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class CameraConfig:
    """Camera placement.

    Attributes:
        position: Camera position in world space.
        target: Point the camera looks at.
        up: Up hint used to derive the camera's right vector.
    """

    position: Vector3 = field(default=Vector3(0.0, 0.5, -1.0))
    target: Vector3 = field(default=Vector3(0.0, 0.0, 0.0))
    up: Vector3 = field(default=Vector3(0.0, 1.0, 0.0))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CameraConfig:
        default = cls()
        return cls(
            position=Vector3.from_iterable(data.get("position", default.position)),
            target=Vector3.from_iterable(data.get("target", default.target)),
            up=Vector3.from_iterable(data.get("up", default.up)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position),
            "target": list(self.target),
            "up": list(self.up),
        }


@dataclass
class RenderConfig:
    """Everything needed to render one frame."""

    scene: Scene
    camera: CameraConfig = field(default_factory=CameraConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    settings: RenderSettings = field(default_factory=RenderSettings)


def load_render_config(path: str | Path) -> RenderConfig:
    """Load a render description from a JSON file.

    Raises:
        KeyError: If the file has no "scene" section.
        ValueError: If any section holds invalid values.
    """
    from src.softpt.scene.scene import Scene

    data = json.loads(Path(path).read_text())
    image = data.get("image", {})
    return RenderConfig(
        scene=Scene.from_dict(data["scene"]),
        camera=CameraConfig.from_dict(data.get("camera", {})),
        image=ImageConfig(
            width=int(image.get("width", ImageConfig.width)),
            height=int(image.get("height", ImageConfig.height)),
        ),
        settings=RenderSettings.from_dict(data.get("settings", {})),
    )
