"""Frame and text output for the pygame host and headless runs."""

import jax.numpy as jnp
import numpy as np
from typing import Tuple

Color = Tuple[int, int, int]

# Names accepted by ``color_scheme`` in conf/config.yaml, as (on, off) pairs
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 10,
    on_color: Color = (0, 255, 0),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Paint the machine's framebuffer as a row-major uint8 image.

    ``display`` is indexed ``[x, y]`` (64 x 32); the result is indexed
    ``[row, column]`` with shape ``(32 * scale, 64 * scale, 3)``, each machine
    pixel becoming a ``scale`` x ``scale`` block. ``main.py`` swaps the first
    two axes back before ``pygame.surfarray.blit_array``, which wants
    ``(width, height, 3)``.
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")

    rows = np.asarray(display, dtype=np.bool_).T
    frame = np.where(
        rows[..., None],
        np.asarray(on_color, dtype=np.uint8),
        np.asarray(off_color, dtype=np.uint8),
    )
    return frame.repeat(scale, axis=0).repeat(scale, axis=1)


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up the ``(on_color, off_color)`` pair for a configured scheme name.

    Raises ValueError listing the known names, so a typo on the command line
    (``color_scheme=ambr``) fails before the window opens.
    """
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {sorted(COLOR_SCHEMES)}"
        ) from None


def display_to_text(display: jnp.ndarray, on_char: str = "#", off_char: str = ".") -> str:
    """Render the display as lines of text, one per screen row."""
    pixels = np.array(display, dtype=np.bool_).T
    return "\n".join(
        "".join(on_char if pixel else off_char for pixel in row) for row in pixels
    )
