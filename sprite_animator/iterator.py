"""Frame-by-frame playback over a pre-computed animation cache."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Hashable, Iterator, Optional, Union

from .animation import AnimationDirection
from .cache import (
    AnimationCache,
    CacheClipEnd,
    CacheClipRepetitionEnd,
    CacheEvent,
    CacheFrame,
    CacheMarkerHit,
)


@dataclass(frozen=True)
class AnimationProgress:
    """Position within an animation: a frame index and a repetition index."""

    frame: int = 0
    repetition: int = 0


@dataclass(frozen=True)
class IteratorMarkerHit:
    """A marker is reached, with the animation repetition it happened in."""

    marker_id: Hashable
    animation_repetition: int
    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class IteratorClipRepetitionEnd:
    """A repetition of a clip has just ended."""

    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class IteratorClipEnd:
    """A clip has just ended."""

    clip_id: Hashable


@dataclass(frozen=True)
class IteratorAnimationRepetitionEnd:
    """A repetition of the whole animation has just ended."""

    animation_repetition: int


IteratorEvent = Union[
    IteratorMarkerHit,
    IteratorClipRepetitionEnd,
    IteratorClipEnd,
    IteratorAnimationRepetitionEnd,
]


@dataclass
class IteratorFrame:
    """A cached frame tagged with the animation repetition it is played in."""

    atlas_index: int
    duration_ms: int
    clip_id: Hashable
    clip_repetition: int
    animation_repetition: int
    events: list[IteratorEvent] = field(default_factory=list)


def _promote(event: CacheEvent, animation_repetition: int) -> IteratorEvent:
    if isinstance(event, CacheMarkerHit):
        return IteratorMarkerHit(
            event.marker_id, animation_repetition, event.clip_id, event.clip_repetition
        )
    if isinstance(event, CacheClipRepetitionEnd):
        return IteratorClipRepetitionEnd(event.clip_id, event.clip_repetition)
    if isinstance(event, CacheClipEnd):
        return IteratorClipEnd(event.clip_id)
    raise TypeError(f"unknown cache event: {event!r}")


class AnimationIterator:
    """Yields ``(IteratorFrame, AnimationProgress)`` pairs until the animation ends."""

    def __init__(self, cache: AnimationCache) -> None:
        self.cache = cache
        self._next_progress = AnimationProgress()
        self._repetition_just_ended: Optional[CacheFrame] = None

    @property
    def next_progress(self) -> AnimationProgress:
        """The progress of the frame that the next call to ``next`` returns."""
        return self._next_progress

    def seek(self, progress: AnimationProgress) -> None:
        """Move to ``progress``; raise ``ValueError`` if it lies outside the animation."""
        frame_count = len(self.cache.frames)
        if not 0 <= progress.frame < frame_count:
            raise ValueError(
                f"invalid frame {progress.frame} in {frame_count}-frame animation"
            )
        repetitions = self.cache.repetitions
        if progress.repetition < 0 or (
            repetitions is not None and progress.repetition >= repetitions
        ):
            raise ValueError(
                f"invalid repetition {progress.repetition} "
                f"in {repetitions}-repetition animation"
            )
        self._next_progress = progress
        self._repetition_just_ended = None

    def __iter__(self) -> Iterator[tuple[IteratorFrame, AnimationProgress]]:
        return self

    def __next__(self) -> tuple[IteratorFrame, AnimationProgress]:
        progress = self._next_progress
        cache = self.cache

        if cache.frames_pong is not None and progress.repetition % 2 == 1:
            frames = cache.frames_pong
        else:
            frames = cache.frames

        if progress.frame >= len(frames):
            raise StopIteration
        cached = frames[progress.frame]

        frame = IteratorFrame(
            atlas_index=cached.atlas_index,
            duration_ms=cached.duration_ms,
            clip_id=cached.clip_id,
            clip_repetition=cached.clip_repetition,
            animation_repetition=progress.repetition,
            events=[_promote(event, progress.repetition) for event in cached.events],
        )

        previous = self._repetition_just_ended
        if previous is not None:
            frame.events.extend(
                [
                    IteratorClipRepetitionEnd(previous.clip_id, previous.clip_repetition),
                    IteratorClipEnd(previous.clip_id),
                    IteratorAnimationRepetitionEnd(max(progress.repetition - 1, 0)),
                ]
            )
            self._repetition_just_ended = None

        next_frame = progress.frame + 1
        next_repetition = progress.repetition
        if next_frame >= len(cache.frames):
            next_repetition += 1
            self._repetition_just_ended = cached
            if cache.repetitions is None or next_repetition < cache.repetitions:
                ping_pong = cache.animation_direction is AnimationDirection.PING_PONG
                next_frame = 1 if ping_pong else 0

        self._next_progress = replace(
            progress, frame=next_frame, repetition=next_repetition
        )
        return frame, progress