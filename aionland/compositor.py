"""Window compositor with smart placement, software rendering and focus handling."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

MAX_SURFACES = 256
MAX_WORKSPACES = 10
MAX_WORKSPACE_SURFACES = 64
MAX_CHILDREN = 16

PLACEMENT_GRID = 50
TITLE_HEIGHT = 30
BORDER_WIDTH = 2
CURSOR_SIZE = 16
LOW_FPS_THRESHOLD = 50.0

FOCUSED_COLOR = 0x4A90E2
TITLE_COLOR = 0x666666
BORDER_COLOR = 0x444444
CURSOR_COLOR = 0xFFFFFF

DEFAULT_WINDOW_SIZE = (800, 600)


@dataclass(eq=False)
class Surface:
    """A client window; ``buffer`` holds 32-bit pixels, ``buffer_stride`` is in bytes."""

    id: int
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    buffer: list[int] | None = None
    buffer_width: int = 0
    buffer_height: int = 0
    buffer_stride: int = 0
    mapped: bool = False
    focused: bool = False
    fullscreen: bool = False
    maximized: bool = False
    title: str = ""
    app_id: str = ""
    parent: Surface | None = None
    children: list[Surface] = field(default_factory=list)
    ai_resize_enabled: bool = False
    ai_placement_enabled: bool = False
    predicted_next_x: int = 0
    predicted_next_y: int = 0

    def contains(self, x: int, y: int) -> bool:
        """Whether the point lies inside the surface rectangle."""
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


@dataclass
class Output:
    """A display with its framebuffer of 32-bit pixels; ``fb_stride`` is in bytes."""

    id: int
    name: str
    width: int
    height: int
    refresh_rate: int
    framebuffer: list[int]
    fb_size: int
    fb_stride: int
    connected: bool = True
    enabled: bool = True

    @property
    def pitch(self) -> int:
        """Pixels per framebuffer row."""
        return self.fb_stride // 4

    def put(self, x: int, y: int, color: int) -> None:
        """Set a pixel if it lies on screen."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.framebuffer[y * self.pitch + x] = color

    def get(self, x: int, y: int) -> int:
        """Read a pixel."""
        return self.framebuffer[y * self.pitch + x]


@dataclass
class _Workspace:
    surfaces: list[Surface] = field(default_factory=list)
    active: bool = False


class Compositor:
    """Places, focuses and draws surfaces onto a single output."""

    def __init__(self, width: int = 1280, height: int = 720, stride: int | None = None):
        if width <= 0 or height <= 0:
            raise ValueError("output size must be positive")
        if stride is None:
            stride = width * 4
        if stride < width * 4 or stride % 4:
            raise ValueError("stride must be a multiple of 4 covering a whole row")

        self._lock = threading.Lock()
        self.output = Output(
            id=0,
            name="HDMI-1",
            width=width,
            height=height,
            refresh_rate=60,
            framebuffer=[0] * (stride // 4 * height),
            fb_size=stride * height,
            fb_stride=stride,
        )
        self.outputs = [self.output]
        self.surfaces: list[Surface] = []
        self.focused_surface: Surface | None = None

        self.smart_window_placement = True
        self.auto_tiling = False
        self.gesture_prediction = True
        self.performance_optimization = True
        self.usage_stats: dict[int, float] = {}

        self.workspaces = [_Workspace() for _ in range(MAX_WORKSPACES)]
        self.current_workspace = 0
        self.workspaces[0].active = True

        self.cursor_x = width // 2
        self.cursor_y = height // 2
        self.cursor_visible = True

        self.vsync_enabled = True
        self.frame_count = 0
        self.last_frame_time = 0.0
        self.fps = 0.0
        self.running = True

        log.info("[Compositor] Initialized %dx%d @ %d Hz", width, height,
                 self.output.refresh_rate)

    def create_surface(self, app_id: str = "") -> Surface:
        """Create a window, place it and size it for its application type."""
        with self._lock:
            workspace = self.workspaces[self.current_workspace]
            if len(self.surfaces) >= MAX_SURFACES:
                raise RuntimeError(f"at most {MAX_SURFACES} surfaces are supported")
            if len(workspace.surfaces) >= MAX_WORKSPACE_SURFACES:
                raise RuntimeError(
                    f"a workspace holds at most {MAX_WORKSPACE_SURFACES} surfaces")

            surface = Surface(id=len(self.surfaces) + 1, app_id=app_id)
            if self.smart_window_placement:
                self.smart_placement(surface)
            else:
                surface.x = len(self.surfaces) * 30
                surface.y = len(self.surfaces) * 30

            surface.width, surface.height = self.predict_window_size(surface)
            surface.ai_resize_enabled = True
            surface.ai_placement_enabled = True

            self.surfaces.append(surface)
            workspace.surfaces.append(surface)

        log.info("[Compositor] Created surface #%d at (%d, %d) size %dx%d", surface.id,
                 surface.x, surface.y, surface.width, surface.height)
        return surface

    def smart_placement(self, surface: Surface) -> tuple[int, int]:
        """Move a surface to the grid spot that overlaps least and sits near the centre."""
        output = self.output
        best_x = best_y = best_score = 0
        center_x = output.width // 2
        center_y = output.height // 2
        mapped = [other for other in self.surfaces if other.mapped]

        for y in range(0, output.height - surface.height, PLACEMENT_GRID):
            for x in range(0, output.width - surface.width, PLACEMENT_GRID):
                score = 100
                for other in mapped:
                    if (x < other.x + other.width and x + surface.width > other.x
                            and y < other.y + other.height and y + surface.height > other.y):
                        score -= 50
                        if other.focused:
                            score -= 30
                score -= (abs(x - center_x) + abs(y - center_y)) // 100
                if x < center_x and y < center_y:
                    score += 10
                if score > best_score:
                    best_score, best_x, best_y = score, x, y

        surface.x, surface.y = best_x, best_y
        log.info("[Compositor AI] Smart placement: (%d, %d) score=%d",
                 best_x, best_y, best_score)
        return best_x, best_y

    def predict_window_size(self, surface: Surface) -> tuple[int, int]:
        """Choose a window size from the application id, clamped to the screen."""
        output = self.output
        app_id = surface.app_id
        if "terminal" in app_id:
            width, height = 1000, 700
        elif "browser" in app_id:
            width, height = int(output.width * 0.8), int(output.height * 0.9)
        elif "editor" in app_id or "ide" in app_id:
            width, height = int(output.width * 0.75), int(output.height * 0.85)
        elif "media" in app_id or "video" in app_id:
            width, height = 1280, 720
        else:
            width, height = DEFAULT_WINDOW_SIZE
        return min(width, output.width), min(height, output.height)

    def render_frame(self) -> None:
        """Draw the background, the mapped surfaces of this workspace and the cursor."""
        output = self.output
        start = time.perf_counter()

        pitch = output.pitch
        for y in range(output.height):
            r = 20 + y * 40 // output.height
            g = 25 + y * 50 // output.height
            b = 35 + y * 70 // output.height
            row = y * pitch
            output.framebuffer[row:row + output.width] = [(r << 16) | (g << 8) | b] * output.width

        for surface in self.workspaces[self.current_workspace].surfaces:
            if surface.mapped:
                self.render_surface(surface)

        if self.cursor_visible:
            self.draw_cursor()

        elapsed = time.perf_counter() - start
        self.frame_count += 1
        self.last_frame_time = elapsed
        elapsed_us = int(elapsed * 1_000_000)
        self.fps = 1_000_000 / elapsed_us if elapsed_us > 0 else float("inf")

    def render_surface(self, surface: Surface) -> None:
        """Draw a surface's title bar, border and content; nothing without a buffer."""
        if surface.buffer is None:
            return
        output = self.output

        title_color = FOCUSED_COLOR if surface.focused else TITLE_COLOR
        for dy in range(TITLE_HEIGHT):
            screen_y = surface.y + dy - TITLE_HEIGHT
            for dx in range(surface.width):
                output.put(surface.x + dx, screen_y, title_color)

        border_color = FOCUSED_COLOR if surface.focused else BORDER_COLOR
        for dx in range(surface.width):
            screen_x = surface.x + dx
            for b in range(BORDER_WIDTH):
                output.put(screen_x, surface.y + b, border_color)
                output.put(screen_x, surface.y + surface.height - 1 - b, border_color)
        for dy in range(surface.height):
            screen_y = surface.y + dy
            for b in range(BORDER_WIDTH):
                output.put(surface.x + b, screen_y, border_color)
                output.put(surface.x + surface.width - 1 - b, screen_y, border_color)

        src_pitch = surface.buffer_stride // 4
        for dy in range(surface.buffer_height):
            for dx in range(surface.buffer_width):
                output.put(surface.x + dx, surface.y + dy,
                           surface.buffer[dy * src_pitch + dx])

    def draw_cursor(self) -> None:
        """Draw a triangular arrow with its tip at the cursor position."""
        for cy in range(CURSOR_SIZE):
            for cx in range(CURSOR_SIZE - cy):
                self.output.put(self.cursor_x + cx, self.cursor_y + cy, CURSOR_COLOR)

    def handle_pointer_motion(self, x: int, y: int) -> Surface | None:
        """Move the cursor and return the surface now under it."""
        self.cursor_x = x
        self.cursor_y = y
        return self.surface_at(x, y)

    def surface_at(self, x: int, y: int) -> Surface | None:
        """Topmost mapped surface of the current workspace at a point."""
        for surface in reversed(self.workspaces[self.current_workspace].surfaces):
            if surface.mapped and surface.contains(x, y):
                return surface
        return None

    def focus_surface(self, surface: Surface | None) -> None:
        """Give a surface the keyboard focus and record when it was used."""
        if surface is None:
            return
        if self.focused_surface is not None:
            self.focused_surface.focused = False
        surface.focused = True
        self.focused_surface = surface
        self.usage_stats[surface.id] = time.time()
        log.info("[Compositor] Focused surface #%d (%s)", surface.id, surface.title)

    def optimize_rendering(self) -> bool:
        """Report whether the frame rate is low enough to need optimisation."""
        if self.fps < LOW_FPS_THRESHOLD:
            log.info("[Compositor AI] Low FPS (%.1f), optimizing...", self.fps)
            return True
        return False