"""Pre-computed frame sequences for animations.

Building a cache resolves every parameter of an animation and of its clips
(durations, repetitions, directions, easings and markers) into a flat list
of frames, so that playback only has to walk that list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Hashable,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Union,
)

from .animation import (
    DEFAULT_DIRECTION,
    DEFAULT_DURATION,
    DEFAULT_REPETITIONS,
    Animation,
    AnimationDirection,
    AnimationDuration,
    DurationKind,
)

logger = logging.getLogger(__name__)


class ClipLike(Protocol):
    """What the cache reads from a clip."""

    frames: Sequence[int]
    markers: Mapping[int, Iterable[Hashable]]
    duration: Optional[AnimationDuration]
    repetitions: Optional[int]
    direction: Optional[AnimationDirection]
    easing: Any


class LibraryLike(Protocol):
    """What the cache reads from an animation library."""

    def get_animation(self, animation_id: Hashable) -> Animation: ...

    def get_clip(self, clip_id: Hashable) -> ClipLike: ...


@dataclass(frozen=True)
class CacheMarkerHit:
    """A marker placed on a frame of a clip is reached."""

    marker_id: Hashable
    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class CacheClipRepetitionEnd:
    """A repetition of a clip has just ended."""

    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class CacheClipEnd:
    """A clip has just ended."""

    clip_id: Hashable


CacheEvent = Union[CacheMarkerHit, CacheClipRepetitionEnd, CacheClipEnd]


@dataclass
class CacheFrame:
    """A frame ready to be played back, with the events it emits."""

    atlas_index: int
    duration_ms: int
    clip_id: Hashable
    clip_repetition: int
    events: list[CacheEvent] = field(default_factory=list)


def _ease(easing: Any, t: float) -> float:
    if callable(easing):
        return float(easing(t))
    return float(easing.get(t))


def apply_easing(durations: Iterable[int], easing: Any) -> list[int]:
    """Redistribute frame durations (ms) along an easing curve.

    ``easing`` is ``None`` for linear timing, otherwise a callable or an
    object with a ``get(t)`` method mapping ``[0, 1]`` onto ``[0, 1]``.
    """
    durations = list(durations)
    if easing is None:
        return durations

    total = sum(durations)
    if total == 0:
        logger.warning("zero duration, cannot apply easing")
        return durations

    eased_durations = []
    accumulated = 0
    previous_eased_time = 0.0
    for duration in durations:
        eased_time = _ease(easing, accumulated / total) * total
        eased_durations.append(max(0, int(eased_time - previous_eased_time)))
        accumulated += duration
        previous_eased_time = eased_time
    return eased_durations


@dataclass(frozen=True)
class _ClipData:
    id: Hashable
    clip: ClipLike
    duration: AnimationDuration
    repetitions: int
    direction: AnimationDirection
    easing: Any
    duration_with_repetitions_ms: int

    @classmethod
    def resolve(cls, clip_id: Hashable, library: LibraryLike) -> _ClipData:
        clip = library.get_clip(clip_id)
        duration = clip.duration if clip.duration is not None else DEFAULT_DURATION
        repetitions = clip.repetitions if clip.repetitions is not None else 1
        direction = clip.direction if clip.direction is not None else DEFAULT_DIRECTION
        frame_count = len(clip.frames)

        if direction is AnimationDirection.PING_PONG:
            frames_with_repetitions = max(frame_count - 1, 0) * repetitions + 1
        else:
            frames_with_repetitions = frame_count * repetitions

        if duration.kind is DurationKind.PER_FRAME:
            total_ms = duration.milliseconds * frames_with_repetitions
        else:
            total_ms = duration.milliseconds

        return cls(
            id=clip_id,
            clip=clip,
            duration=duration,
            repetitions=repetitions,
            direction=direction,
            easing=clip.easing,
            duration_with_repetitions_ms=total_ms,
        )

    @property
    def playable(self) -> bool:
        return (
            len(self.clip.frames) > 0
            and self.repetitions > 0
            and self.duration_with_repetitions_ms > 0
        )


@dataclass(frozen=True)
class _Frame:
    atlas_index: int
    duration_ms: int
    markers: tuple[Hashable, ...]


_Repetition = tuple[_Frame, ...]


@dataclass(frozen=True)
class _ClipFrames:
    repetitions: tuple[_Repetition, ...]
    data: _ClipData

    @classmethod
    def generate(cls, data: _ClipData, frame_duration_ms: int) -> _ClipFrames:
        markers = data.clip.markers
        reference = tuple(
            _Frame(atlas_index, frame_duration_ms, tuple(markers.get(index, ())))
            for index, atlas_index in enumerate(data.clip.frames)
            if frame_duration_ms > 0
        )

        def repetition(number: int) -> _Repetition:
            if data.direction is AnimationDirection.FORWARDS:
                return reference
            if data.direction is AnimationDirection.BACKWARDS:
                return reference[::-1]
            if number == 0:
                return reference
            if number % 2 == 0:
                return reference[1:]
            return reference[::-1][1:]

        repetitions = tuple(
            frames
            for frames in map(repetition, range(data.repetitions))
            if frames
        )
        return cls(repetitions, data)

    def backwards(self) -> _ClipFrames:
        return _ClipFrames(
            tuple(frames[::-1] for frames in reversed(self.repetitions)), self.data
        )


def _backwards(clips: Sequence[_ClipFrames]) -> list[_ClipFrames]:
    return [clip.backwards() for clip in reversed(clips)]


def _merge(clips: Sequence[_ClipFrames], easing: Any) -> list[CacheFrame]:
    """Flatten the clip/repetition tree into frames, injecting boundary events."""
    all_frames: list[CacheFrame] = []
    previous_clip: Optional[Hashable] = None
    previous_clip_repetition: Optional[tuple[Hashable, int]] = None

    for clip in clips:
        clip_id = clip.data.id
        clip_frames: list[CacheFrame] = []

        for repetition_index, repetition in enumerate(clip.repetitions):
            eased = apply_easing((f.duration_ms for f in repetition), clip.data.easing)
            frames = [
                CacheFrame(
                    atlas_index=frame.atlas_index,
                    duration_ms=duration,
                    clip_id=clip_id,
                    clip_repetition=repetition_index,
                    events=[
                        CacheMarkerHit(marker, clip_id, repetition_index)
                        for marker in frame.markers
                    ],
                )
                for frame, duration in zip(repetition, eased)
            ]

            if previous_clip_repetition is not None:
                frames[0].events.append(CacheClipRepetitionEnd(*previous_clip_repetition))
            previous_clip_repetition = (clip_id, repetition_index)
            clip_frames.extend(frames)

        if previous_clip is not None:
            clip_frames[0].events.append(CacheClipEnd(previous_clip))
        previous_clip = clip_id
        all_frames.extend(clip_frames)

    eased = apply_easing((frame.duration_ms for frame in all_frames), easing)
    for frame, duration in zip(all_frames, eased):
        frame.duration_ms = duration
    return all_frames


def _frame_duration_ms(
    data: _ClipData, animation: Animation, animation_duration_ms: int
) -> int:
    override = animation.duration
    if override is None:
        duration = data.duration
    elif override.kind is DurationKind.PER_FRAME:
        duration = override
    else:
        ratio = data.duration_with_repetitions_ms / animation_duration_ms
        duration = AnimationDuration.per_repetition(
            int(override.milliseconds * ratio / data.repetitions)
        )

    if duration.kind is DurationKind.PER_FRAME:
        return duration.milliseconds
    return duration.milliseconds // len(data.clip.frames)


@dataclass
class AnimationCache:
    """All the frames of one repetition of an animation.

    ``frames_pong`` holds the frames for odd repetitions of a ping-pong
    animation and is ``None`` otherwise. ``repetitions`` is ``None`` when
    the animation loops forever.
    """

    frames: list[CacheFrame] = field(default_factory=list)
    frames_pong: Optional[list[CacheFrame]] = None
    repetitions: Optional[int] = None
    animation_direction: AnimationDirection = AnimationDirection.FORWARDS

    @classmethod
    def empty(cls) -> AnimationCache:
        """A cache that plays no frames."""
        return cls()

    @classmethod
    def build(cls, animation_id: Hashable, library: LibraryLike) -> AnimationCache:
        """Resolve an animation registered in ``library`` into its frames."""
        animation = library.get_animation(animation_id)
        repeat = animation.repetitions or DEFAULT_REPETITIONS
        if repeat.times == 0:
            return cls.empty()

        clips_data = [
            data
            for data in (_ClipData.resolve(clip_id, library) for clip_id in animation.clip_ids)
            if data.playable
        ]
        animation_duration_ms = sum(d.duration_with_repetitions_ms for d in clips_data)
        if animation_duration_ms == 0:
            return cls.empty()

        clips = [
            _ClipFrames.generate(data, _frame_duration_ms(data, animation, animation_duration_ms))
            for data in clips_data
        ]
        clips = [clip for clip in clips if clip.repetitions]

        direction = animation.direction or DEFAULT_DIRECTION
        easing = animation.easing

        if direction is AnimationDirection.BACKWARDS:
            frames = _merge(_backwards(clips), easing)
            frames_pong = None
        else:
            frames = _merge(clips, easing)
            frames_pong = (
                _merge(_backwards(clips), easing)
                if direction is AnimationDirection.PING_PONG
                else None
            )

        return cls(
            frames=frames,
            frames_pong=frames_pong,
            repetitions=repeat.times,
            animation_direction=direction,
        )