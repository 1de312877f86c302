"""HSLA colour payload carried by Voronoi cells."""

import colorsys
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class HSLA:
    """Hue, saturation, lightness and alpha, each in [0, 1]."""

    hue: float = 0.0
    saturation: float = 0.0
    lightness: float = 0.0
    alpha: float = 1.0

    def __post_init__(self):
        for name in ("hue", "saturation", "lightness", "alpha"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"HSLA {name} must be within [0, 1], got {value}")

    def to_rgb(self) -> Tuple[float, float, float]:
        # colorsys orders the components as h, l, s
        return colorsys.hls_to_rgb(self.hue, self.lightness, self.saturation)

    def to_hex(self) -> str:
        r, g, b = (round(c * 255) for c in self.to_rgb())
        return f"#{r:02x}{g:02x}{b:02x}"


def random_colour(rng: Optional[np.random.Generator] = None) -> HSLA:
    """Saturated, mid-lightness colour with a random hue."""
    rng = rng if rng is not None else np.random.default_rng()
    return HSLA(
        hue=float(rng.random()),
        saturation=float(0.5 + 0.4 * rng.random()),
        lightness=float(0.45 + 0.2 * rng.random()),
        alpha=1.0,
    )
