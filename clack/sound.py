"""Fire-and-forget typewriter sound effects.

Requests go onto a bounded queue read by one daemon worker thread, so the
editing loop never waits on audio. When the queue is full the oldest
pending request is discarded; when every voice is busy the oldest playing
sound is cut off. Fresh keystrokes always win over completeness.
"""

import logging
import queue
import threading
from enum import Enum
from typing import Callable, Optional, Protocol

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class Sound(Enum):
    KEY = "key"
    SPACE = "space"
    BACKSPACE = "backspace"
    RETURN = "return"
    DING = "margin_bell"
    STARTUP = "startup"
    TOGGLE = "mode_toggle"
    FEED = "page_feed"


class SoundBackend(Protocol):
    def play(self, sound: Sound) -> None:
        ...


class PygameBackend:
    """Synthesised sounds played through a fixed pool of pygame mixer channels."""

    SAMPLE_RATE = 22050

    def __init__(self, max_voices: int = EditorConstants.MAX_VOICES):
        import numpy as np
        import pygame

        self._np = np
        self._pygame = pygame
        pygame.mixer.init(frequency=self.SAMPLE_RATE, size=-16, channels=2)
        pygame.mixer.set_num_channels(max_voices)
        self._sounds = {sound: self._make_sound(sound) for sound in Sound}

    def _to_sound(self, samples):
        np = self._np
        data = (np.clip(samples, -1.0, 1.0) * (2**15 - 1)).astype(np.int16)
        return self._pygame.sndarray.make_sound(np.column_stack([data, data]))

    def _time(self, seconds: float):
        return self._np.linspace(0, seconds, int(seconds * self.SAMPLE_RATE), endpoint=False)

    def _click(self, seconds: float, gain: float):
        np = self._np
        length = int(seconds * self.SAMPLE_RATE)
        noise = np.random.uniform(-1, 1, length)
        return noise * np.linspace(1.0, 0.0, length) * gain

    def _tone(self, freq: float, seconds: float, decay: float, gain: float):
        np = self._np
        t = self._time(seconds)
        return gain * np.sin(2 * np.pi * freq * t) * np.exp(-decay * t)

    def _thunk(self, seconds: float = 0.07):
        return self._tone(110.0, seconds, 18, 0.9) + self._tone(2200.0, seconds, 250, 0.08)

    def _make_sound(self, sound: Sound):
        np = self._np
        if sound is Sound.KEY:
            samples = self._click(0.02, 0.3)
        elif sound is Sound.SPACE:
            samples = self._click(0.03, 0.2) + self._tone(180.0, 0.03, 60, 0.2)
        elif sound is Sound.BACKSPACE:
            samples = self._click(0.025, 0.25) + self._tone(400.0, 0.025, 80, 0.15)
        elif sound is Sound.RETURN:
            samples = np.concatenate([self._click(0.05, 0.15), self._thunk()])
        elif sound is Sound.DING:
            samples = self._tone(1500.0, 0.14, 8, 0.6)
        elif sound is Sound.STARTUP:
            samples = np.concatenate([self._thunk(), self._click(0.08, 0.1), self._thunk()])
        elif sound is Sound.TOGGLE:
            samples = self._tone(90.0, 0.05, 30, 0.7)
        else:
            # Paper feed: a rising ratchet of small clicks
            samples = np.concatenate([self._click(0.015, 0.1 + 0.02 * i) for i in range(12)])
        return self._to_sound(samples)

    def play(self, sound: Sound) -> None:
        channel = self._pygame.mixer.find_channel(True)
        if channel is not None:
            channel.play(self._sounds[sound])


class AudioEngine:
    """Non-blocking front end to a sound backend running on its own thread."""

    def __init__(
        self,
        enabled: bool = True,
        backend_factory: Optional[Callable[[int], SoundBackend]] = None,
        max_voices: int = EditorConstants.MAX_VOICES,
        queue_size: int = EditorConstants.SOUND_QUEUE_SIZE,
    ):
        self.enabled = enabled
        self.max_voices = max_voices
        self._backend_factory = backend_factory or PygameBackend
        self._queue: "queue.Queue[Optional[Sound]]" = queue.Queue(maxsize=queue_size)
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()
        self._available = True

    def trigger(self, sound: Sound) -> None:
        """Request a sound. Never blocks and never raises."""
        if not self.enabled or not self._available:
            return
        self._ensure_worker()
        self._put_dropping_oldest(sound)

    def _put_dropping_oldest(self, item: Optional[Sound]) -> None:
        while True:
            try:
                self._queue.put_nowait(item)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name="clack-audio", daemon=True)
                self._thread.start()

    def _run(self) -> None:
        try:
            backend = self._backend_factory(self.max_voices)
        except Exception as e:
            # Justification: missing audio libraries or devices must only
            # silence the typewriter, never take the editor down.
            logger.warning(f"Audio unavailable, sound disabled: {e}")
            self._available = False
            return

        while True:
            sound = self._queue.get()
            if sound is None:
                break
            try:
                backend.play(sound)
            except Exception:
                # Justification: a failed playback is not observable to the caller.
                logger.debug(f"Could not play {sound.value}", exc_info=True)

    def close(self) -> None:
        """Stop the worker thread if it was started."""
        if self._thread is None:
            return
        self._put_dropping_oldest(None)
        self._thread.join(timeout=1.0)
        self._thread = None
