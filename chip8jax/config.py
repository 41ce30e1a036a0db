"""Emulator configuration.

``EmulatorConfig`` doubles as an OmegaConf structured config, so defaults,
an optional YAML file and ``key=value`` overrides merge with type checking.
"""

import dataclasses
from typing import Optional, Sequence, Tuple

from omegaconf import OmegaConf

from chip8jax.constants import DEFAULT_CLOCK_RATE, SCREEN_HEIGHT, SCREEN_WIDTH, TIMER_HZ
from chip8jax.rendering import create_color_scheme

Color = Tuple[int, int, int]


@dataclasses.dataclass
class EmulatorConfig:
    """Runtime configuration.

    Attributes:
        clock_rate: Instructions per second
        timer_hz: Timer tick and frame rate
        width: Display width in CHIP-8 pixels
        height: Display height in CHIP-8 pixels
        scale_factor: Window pixels per CHIP-8 pixel
        fg_color: RGB color for lit pixels
        bg_color: RGB color for unlit pixels
        color_scheme: Named scheme, overrides ``fg_color``/``bg_color`` when set
        pixel_outline: Draw a background colored outline around lit pixels
        tone_hz: Square wave frequency
        volume: Tone volume between 0 and 1
        seed: Seed for the random instruction
        trace: Log every executed instruction
        log_level: Console log level
    """
    clock_rate: int = DEFAULT_CLOCK_RATE
    timer_hz: int = TIMER_HZ
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    scale_factor: int = 20
    fg_color: Tuple[int, int, int] = (255, 255, 255)
    bg_color: Tuple[int, int, int] = (0, 0, 0)
    color_scheme: Optional[str] = None
    pixel_outline: bool = True
    tone_hz: int = 440
    volume: float = 0.2
    seed: int = 0
    trace: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        self.fg_color = tuple(self.fg_color)
        self.bg_color = tuple(self.bg_color)

    def validate(self):
        for name in ("clock_rate", "timer_hz", "width", "height", "scale_factor", "tone_hz"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be between 0 and 1, got {self.volume}")
        for name in ("fg_color", "bg_color"):
            color = getattr(self, name)
            if len(color) != 3 or not all(0 <= c <= 255 for c in color):
                raise ValueError(f"{name} must be three values in 0..255, got {color}")
        if self.color_scheme is not None:
            create_color_scheme(self.color_scheme)

    @property
    def colors(self) -> Tuple[Color, Color]:
        """(on_color, off_color) after applying the color scheme."""
        if self.color_scheme is not None:
            return create_color_scheme(self.color_scheme)
        return self.fg_color, self.bg_color


def load_config(path: Optional[str] = None, overrides: Sequence[str] = ()) -> EmulatorConfig:
    """Merge defaults, an optional YAML file and dot-list overrides.

    Args:
        path: YAML file with any subset of the ``EmulatorConfig`` fields
        overrides: ``key=value`` strings applied last

    Returns:
        Validated EmulatorConfig
    """
    layers = [OmegaConf.structured(EmulatorConfig)]
    if path is not None:
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(OmegaConf.from_dotlist(list(overrides)))
    config = OmegaConf.to_object(OmegaConf.merge(*layers))
    config.validate()
    return config


def config_to_dict(config: EmulatorConfig) -> dict:
    return dataclasses.asdict(config)
