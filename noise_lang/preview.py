"""Live preview of the bound output module.

A render thread samples the whole frame with one vectorised ``get_value``
call and keeps the newest finished frame. The window itself lives on the
thread that calls ``poll_events()``, which pumps its events and presents
that frame.
"""

import logging
import threading
import time
from typing import Callable, Optional

import numpy as np
import pyglet

from .models import PreviewSettings
from .modules import Const, Module

logger = logging.getLogger(__name__)

Sampler = Callable[[], Module]


class PygletSurface:
    """A resizable pyglet window that blits RGBA frames."""

    def __init__(
        self,
        width: int,
        height: int,
        title: str,
        on_resize: Optional[Callable[[int, int], None]] = None,
    ):
        self.window = pyglet.window.Window(width, height, caption=title, resizable=True)
        if on_resize is not None:
            # Returns None, so the window's own viewport handler still runs.
            self.window.push_handlers(on_resize=on_resize)

    def dispatch_events(self) -> bool:
        self.window.dispatch_events()
        return not self.window.has_exit

    def present(self, frame: np.ndarray) -> None:
        height, width = frame.shape[:2]
        # pyglet rows run bottom-up.
        image = pyglet.image.ImageData(width, height, "RGBA", frame[::-1].tobytes())
        self.window.switch_to()
        self.window.clear()
        image.blit(0, 0)
        self.window.flip()

    def close(self) -> None:
        self.window.close()


class PreviewRenderer:
    def __init__(
        self,
        width: int,
        height: int,
        settings: Optional[PreviewSettings] = None,
        surface_factory: Optional[Callable[..., object]] = None,
    ):
        self.width = width
        self.height = height
        self.settings = settings if settings is not None else PreviewSettings()
        self.noise_x = 0.0
        self.noise_y = 0.0
        self.noise_z = 0.0
        self.fps = 0.0
        self.frames = 0

        self._surface_factory = surface_factory or PygletSurface
        self._surface = None
        self._fallback = Const(0.0)
        self._sampler: Sampler = lambda: self._fallback
        self._lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None
        self._stop = threading.Event()
        self._dead = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # --- Control ---

    def set_sampler(self, sampler: Sampler) -> None:
        """Install the callable that yields the module to draw each frame."""
        self._sampler = sampler

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._render_loop, name="noiselang-render", daemon=True
        )
        self._thread.start()
        logger.debug("preview %dx%d started", self.width, self.height)

    def stop(self) -> None:
        """Stop the render thread and wait for it; the window is closed too."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._dead.set()
        self.close()
        logger.debug("preview stopped after %d frames", self.frames)

    def is_dead(self) -> bool:
        return self._dead.is_set()

    def poll_events(self) -> bool:
        """Pump the window; False once it has been closed or the renderer stopped."""
        if self._dead.is_set():
            return False
        if self._surface is None:
            self._surface = self._surface_factory(
                self.width, self.height, self.settings.title, on_resize=self.resize
            )
        if not self._surface.dispatch_events():
            logger.debug("preview window closed")
            self.stop()
            return False
        frame = self.latest_frame()
        if frame is not None:
            self._surface.present(frame)
        return True

    def close(self) -> None:
        surface, self._surface = self._surface, None
        if surface is not None:
            surface.close()

    def resize(self, width: int, height: int) -> None:
        if width > 0 and height > 0:
            with self._lock:
                self.width, self.height = width, height

    def latest_frame(self) -> Optional[np.ndarray]:
        with self._lock:
            return self._frame

    # --- Rendering ---

    def on_render(self, dt: float) -> None:
        """Per-frame animation hook."""
        self.noise_z += self.settings.z_step

    def render_frame(self) -> np.ndarray:
        module = self._sampler()
        with self._lock:
            width, height = self.width, self.height
        scale = self.settings.scale
        xs = self.noise_x + np.arange(width) * scale
        ys = self.noise_y + np.arange(height) * scale
        grid_x, grid_y = np.meshgrid(xs, ys)
        values = np.asarray(module.get_value(grid_x, grid_y, self.noise_z), dtype=np.float64)
        values = np.nan_to_num(values, nan=0.0, posinf=1.0, neginf=-1.0)
        grey = np.clip(255.0 * (1.0 + values) / 2.0, 0.0, 255.0).astype(np.uint8)

        frame = np.empty((height, width, 4), dtype=np.uint8)
        frame[..., :3] = grey[..., np.newaxis]
        frame[..., 3] = 255
        return frame

    def _render_loop(self) -> None:
        last = time.perf_counter()
        try:
            while not self._stop.is_set():
                frame = self.render_frame()
                with self._lock:
                    self._frame = frame
                self.frames += 1

                now = time.perf_counter()
                dt = now - last
                if self.settings.fps > 0:
                    spare = 1.0 / self.settings.fps - dt
                    if spare > 0 and self._stop.wait(spare):
                        break
                    now = time.perf_counter()
                    dt = now - last
                last = now
                if dt > 0:
                    self.fps = 1.0 / dt
                self.on_render(dt)
        except Exception:
            logger.exception("preview render loop failed")
            self._dead.set()
