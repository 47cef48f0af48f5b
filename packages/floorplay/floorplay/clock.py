"""PlaybackClock - the time cursor every other component reads."""

import math


class PlaybackClock:
    def __init__(self, duration_sec: float = 300.0) -> None:
        if not math.isfinite(duration_sec) or duration_sec <= 0:
            raise ValueError("duration_sec must be positive and finite")
        self._duration = duration_sec
        self._time = 0.0
        self._speed = 1.0
        self._playing = False
        self._tick_number = 0

    @property
    def duration_sec(self) -> float:
        return self._duration

    @property
    def time_sec(self) -> float:
        return self._time

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def at_end(self) -> bool:
        return self._time >= self._duration

    def play(self) -> None:
        self._playing = True

    def pause(self) -> None:
        self._playing = False

    def set_speed(self, multiplier: float) -> None:
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise ValueError("speed multiplier must be positive and finite")
        self._speed = multiplier

    def set_time(self, t: float) -> float:
        """Jump to ``t`` (clamped). Returns the time before the jump."""
        if not math.isfinite(t):
            raise ValueError("t must be finite")
        previous = self._time
        self._time = self._clamp(t)
        return previous

    def tick(self, dt: float) -> float:
        """Advance one frame of ``dt`` wall seconds.

        Returns how far playback time moved, which is zero while paused.
        Reaching the end of the window pauses the clock.
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError("dt must be finite and non-negative")
        self._tick_number += 1
        if not self._playing:
            return 0.0
        previous = self._time
        self._time = self._clamp(previous + dt * self._speed)
        if self.at_end:
            self._playing = False
        return self._time - previous

    def _clamp(self, t: float) -> float:
        return max(0.0, min(t, self._duration))
