"""Frame-to-frame application state and the main loop.

Between frames the application advances the orbiting sphere and reacts to
the arrow keys:

    Left / Right  halve / double the detail scale, within [1, 16]
    Down / Up     decrease / increase the recursion depth, within [1, 4]

As in the classic demo loop, each pair is checked else-if: a Left press that
is allowed wins over a simultaneous Right press.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.preview.controls import FrameState, run
    >>> from src.tinytrace.preview.display import RasterDisplay
    >>> from src.tinytrace.scene.default_scene import create_default_scene
    >>>
    >>> scene, _ = create_default_scene()
    >>> display = RasterDisplay(max_frames=3)
    >>> run(scene, display, FrameState())
    3
"""

from dataclasses import dataclass, field

from src.tinytrace.core.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_SCALE,
    MAX_DEPTH_LIMIT,
    MAX_SCALE,
    MIN_DEPTH,
    MIN_SCALE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    RenderConfig,
)
from src.tinytrace.core.renderer import draw_commands, render
from src.tinytrace.preview.display import Display, Key
from src.tinytrace.scene.default_scene import (
    ORBIT_STEP_DEGREES,
    ORBITING_SPHERE,
    orbit_position,
)
from src.tinytrace.scene.manager import Scene

WINDOW_TITLE = "TINY_RAY_TRACER"
TARGET_FPS = 60
CLEAR_COLOR = (0, 0, 0, 255)


@dataclass
class FrameState:
    """Caller-owned parameters that change between frames.

    Attributes:
        scale: Detail scale, a power of two in [1, 16].
        max_depth: Recursion depth in [1, 4].
        angle: Orbit angle of the orbiting sphere in degrees, in [0, 360).
    """

    scale: int = DEFAULT_SCALE
    max_depth: int = DEFAULT_MAX_DEPTH
    angle: int = 0

    def render_config(self) -> RenderConfig:
        """Build the RenderConfig for the current state."""
        return RenderConfig(scale=self.scale, max_depth=self.max_depth)


@dataclass
class FrameController:
    """Applies the per-frame update policy to a scene and its FrameState.

    Attributes:
        scene: Scene whose orbiting sphere is moved each frame.
        state: The state being updated.
        orbit: Whether to advance the orbit animation.
    """

    scene: Scene
    state: FrameState = field(default_factory=FrameState)
    orbit: bool = True

    def advance_orbit(self) -> None:
        """Step the orbit angle and move the orbiting sphere."""
        self.state.angle = (self.state.angle + ORBIT_STEP_DEGREES) % 360
        if len(self.scene.spheres) > ORBITING_SPHERE:
            y = self.scene.spheres[ORBITING_SPHERE].center[1]
            self.scene.move_sphere(ORBITING_SPHERE, orbit_position(self.state.angle, y))

    def handle_keys(self, display: Display) -> None:
        """Adjust scale and depth from this frame's key presses."""
        state = self.state
        if state.scale > MIN_SCALE and display.poll_key_pressed(Key.SCALE_DOWN):
            state.scale //= 2
        elif state.scale < MAX_SCALE and display.poll_key_pressed(Key.SCALE_UP):
            state.scale *= 2

        if state.max_depth > MIN_DEPTH and display.poll_key_pressed(Key.DEPTH_DOWN):
            state.max_depth -= 1
        elif state.max_depth < MAX_DEPTH_LIMIT and display.poll_key_pressed(Key.DEPTH_UP):
            state.max_depth += 1

    def update(self, display: Display) -> RenderConfig:
        """Advance the orbit, then handle keys.

        Returns:
            The RenderConfig for the frame about to be rendered.
        """
        if self.orbit:
            self.advance_orbit()
        self.handle_keys(display)
        return self.state.render_config()


def run(
    scene: Scene,
    display: Display,
    state: FrameState | None = None,
    max_frames: int | None = None,
    *,
    orbit: bool = True,
) -> int:
    """Run the main loop until the display asks to close.

    Each frame: update the state, render, clear to black, draw the
    rectangles and present.

    Args:
        scene: The scene to render; mutated by the orbit animation.
        display: The display collaborator.
        state: Initial frame state, updated in place.
        max_frames: Stop after this many frames.
        orbit: Whether to animate the orbiting sphere.

    Returns:
        The number of frames rendered.
    """
    controller = FrameController(scene, state if state is not None else FrameState(), orbit)

    display.create_window(SCREEN_WIDTH, SCREEN_HEIGHT, WINDOW_TITLE)
    display.set_target_fps(TARGET_FPS)

    frames = 0
    while not display.window_should_close():
        if max_frames is not None and frames >= max_frames:
            break
        config = controller.update(display)
        commands = render(scene, config)

        display.begin_frame()
        display.clear(CLEAR_COLOR)
        draw_commands(commands, display)
        display.end_frame()
        frames += 1

    display.close_window()
    return frames
