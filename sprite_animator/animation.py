"""Animation descriptions: identifiers, playback parameters and clip sequences."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Hashable, Iterable, Optional

_MAX_MILLISECONDS = 2**32 - 1


@dataclass(frozen=True, order=True)
class AnimationId:
    """Opaque identifier of an animation registered in a library."""

    value: int

    def __str__(self) -> str:
        return f"animation{self.value}"


class DurationKind(enum.Enum):
    """How the milliseconds of an :class:`AnimationDuration` are applied."""

    PER_FRAME = "per_frame"
    PER_REPETITION = "per_repetition"


@dataclass(frozen=True)
class AnimationDuration:
    """Duration of an animation, either per frame or per repetition, in milliseconds."""

    kind: DurationKind
    milliseconds: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, DurationKind):
            raise TypeError(f"invalid duration kind: {self.kind!r}")
        if isinstance(self.milliseconds, bool) or not isinstance(self.milliseconds, int):
            raise TypeError("duration must be an integer number of milliseconds")
        if not 0 <= self.milliseconds <= _MAX_MILLISECONDS:
            raise ValueError(f"duration out of range: {self.milliseconds} ms")

    @classmethod
    def per_frame(cls, milliseconds: int) -> AnimationDuration:
        """Each frame lasts the given number of milliseconds."""
        return cls(DurationKind.PER_FRAME, milliseconds)

    @classmethod
    def per_repetition(cls, milliseconds: int) -> AnimationDuration:
        """One repetition of the animation lasts the given number of milliseconds."""
        return cls(DurationKind.PER_REPETITION, milliseconds)

    def __repr__(self) -> str:
        name = "PerFrame" if self.kind is DurationKind.PER_FRAME else "PerRepetition"
        return f"{name}({self.milliseconds})"


@dataclass(frozen=True)
class AnimationRepeat:
    """How many times an animation repeats; ``times`` is ``None`` when it loops forever."""

    times: Optional[int] = None

    def __post_init__(self) -> None:
        if self.times is None:
            return
        if isinstance(self.times, bool) or not isinstance(self.times, int):
            raise TypeError("repetition count must be an integer")
        if self.times < 0:
            raise ValueError(f"repetition count cannot be negative: {self.times}")

    @classmethod
    def loop(cls) -> AnimationRepeat:
        """Repeat indefinitely."""
        return cls(None)

    @classmethod
    def count(cls, times: int) -> AnimationRepeat:
        """Repeat a fixed number of times."""
        return cls(times)

    @property
    def is_loop(self) -> bool:
        return self.times is None

    def __repr__(self) -> str:
        return "Loop" if self.times is None else f"Times({self.times})"


class AnimationDirection(enum.Enum):
    """Playback direction of an animation."""

    FORWARDS = "forwards"
    BACKWARDS = "backwards"
    PING_PONG = "ping_pong"


DEFAULT_DURATION = AnimationDuration.per_frame(100)
DEFAULT_REPETITIONS = AnimationRepeat.loop()
DEFAULT_DIRECTION = AnimationDirection.FORWARDS


@dataclass(frozen=True)
class Animation:
    """A playable animation made of one or several clips.

    Unset parameters are ``None``; when set they are combined with the
    parameters of the underlying clips.
    """

    clip_ids: tuple[Hashable, ...]
    duration: Optional[AnimationDuration] = None
    repetitions: Optional[AnimationRepeat] = None
    direction: Optional[AnimationDirection] = None
    easing: Optional[Any] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "clip_ids", tuple(self.clip_ids))
        if self.duration is not None and not isinstance(self.duration, AnimationDuration):
            raise TypeError(f"invalid duration: {self.duration!r}")
        if self.repetitions is not None and not isinstance(self.repetitions, AnimationRepeat):
            raise TypeError(f"invalid repetitions: {self.repetitions!r}")
        if self.direction is not None and not isinstance(self.direction, AnimationDirection):
            raise TypeError(f"invalid direction: {self.direction!r}")

    @classmethod
    def from_clip(cls, clip_id: Hashable) -> Animation:
        """Create an animation from a single clip."""
        return cls((clip_id,))

    @classmethod
    def from_clips(cls, clip_ids: Iterable[Hashable]) -> Animation:
        """Create an animation from a sequence of clips, played in order."""
        return cls(tuple(clip_ids))

    def with_duration(self, duration: AnimationDuration) -> Animation:
        return replace(self, duration=duration)

    def with_repetitions(self, repetitions: AnimationRepeat) -> Animation:
        return replace(self, repetitions=repetitions)

    def with_direction(self, direction: AnimationDirection) -> Animation:
        return replace(self, direction=direction)

    def with_easing(self, easing: Any) -> Animation:
        return replace(self, easing=easing)