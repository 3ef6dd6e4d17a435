"""Screen constants and per-frame render configuration.

The renderer shoots one ray per macro-pixel: a scale x scale block of screen
pixels. Every legal scale is a power of two that divides both screen
dimensions, so the reduced grid always tiles the screen exactly.

Example:
    >>> config = RenderConfig(scale=4, max_depth=2)
    >>> config.grid_size
    (256, 192)
"""

from dataclasses import dataclass

# Screen size in pixels
SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 768

# Detail scale bounds (macro-pixel edge length)
MIN_SCALE = 1
MAX_SCALE = 16

# Recursion depth bounds
MIN_DEPTH = 1
MAX_DEPTH_LIMIT = 4

# Defaults used at startup
DEFAULT_SCALE = 8
DEFAULT_MAX_DEPTH = 4

# Largest reduced grid, reached at scale 1
MAX_GRID_WIDTH = SCREEN_WIDTH // MIN_SCALE
MAX_GRID_HEIGHT = SCREEN_HEIGHT // MIN_SCALE


def is_valid_scale(scale: int) -> bool:
    """Whether scale is a power of two in [MIN_SCALE, MAX_SCALE]."""
    return MIN_SCALE <= scale <= MAX_SCALE and (scale & (scale - 1)) == 0


@dataclass(frozen=True)
class RenderConfig:
    """Parameters of a single render call.

    Attributes:
        scale: Macro-pixel edge length in screen pixels. A power of two in
            [1, 16].
        max_depth: Maximum recursion depth of reflected and refracted rays,
            in [1, 4].
    """

    scale: int = DEFAULT_SCALE
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If scale is not a power of two in [1, 16] or
                max_depth is outside [1, 4].
        """
        if not is_valid_scale(self.scale):
            raise ValueError(
                f"scale must be a power of two in [{MIN_SCALE}, {MAX_SCALE}], got {self.scale}"
            )
        if not MIN_DEPTH <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be in [{MIN_DEPTH}, {MAX_DEPTH_LIMIT}], got {self.max_depth}"
            )

    @property
    def grid_size(self) -> tuple[int, int]:
        """Reduced grid dimensions as (width, height)."""
        return SCREEN_WIDTH // self.scale, SCREEN_HEIGHT // self.scale
