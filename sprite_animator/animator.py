"""Time-driven playback of animations on a set of animated targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Hashable, Iterable, Optional, Union

from .cache import AnimationCache, LibraryLike
from .iterator import (
    AnimationIterator,
    AnimationProgress,
    IteratorAnimationRepetitionEnd,
    IteratorClipEnd,
    IteratorClipRepetitionEnd,
    IteratorEvent,
    IteratorFrame,
    IteratorMarkerHit,
)


@dataclass(frozen=True)
class MarkerHit:
    """An animation reached a frame carrying a marker."""

    entity: Hashable
    marker_id: Hashable
    animation_id: Hashable
    animation_repetition: int
    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class ClipRepetitionEnd:
    """A repetition of a clip ended."""

    entity: Hashable
    animation_id: Hashable
    clip_id: Hashable
    clip_repetition: int


@dataclass(frozen=True)
class ClipEnd:
    """A clip ended."""

    entity: Hashable
    animation_id: Hashable
    clip_id: Hashable


@dataclass(frozen=True)
class AnimationRepetitionEnd:
    """A repetition of the whole animation ended."""

    entity: Hashable
    animation_id: Hashable
    animation_repetition: int


@dataclass(frozen=True)
class AnimationEnd:
    """The animation played its last frame."""

    entity: Hashable
    animation_id: Hashable


AnimationEvent = Union[
    MarkerHit, ClipRepetitionEnd, ClipEnd, AnimationRepetitionEnd, AnimationEnd
]


@dataclass
class AnimationTarget:
    """Something animated: which animation it plays and where it stands.

    ``atlas_index`` receives the atlas index of the frame being shown.
    Writing a new ``progress`` jumps to that position on the next update;
    changing ``animation_id`` starts the new animation.
    """

    entity: Hashable
    animation_id: Hashable
    progress: AnimationProgress = field(default_factory=AnimationProgress)
    playing: bool = True
    speed_factor: float = 1.0
    atlas_index: Optional[int] = None


_Current = tuple[IteratorFrame, AnimationProgress]


@dataclass
class _Instance:
    animation_id: Hashable
    iterator: AnimationIterator
    current: Optional[_Current]
    accumulated_ms: float = 0.0


def _promote(
    event: IteratorEvent, entity: Hashable, animation_id: Hashable
) -> AnimationEvent:
    if isinstance(event, IteratorMarkerHit):
        return MarkerHit(
            entity,
            event.marker_id,
            animation_id,
            event.animation_repetition,
            event.clip_id,
            event.clip_repetition,
        )
    if isinstance(event, IteratorClipRepetitionEnd):
        return ClipRepetitionEnd(entity, animation_id, event.clip_id, event.clip_repetition)
    if isinstance(event, IteratorClipEnd):
        return ClipEnd(entity, animation_id, event.clip_id)
    if isinstance(event, IteratorAnimationRepetitionEnd):
        return AnimationRepetitionEnd(entity, animation_id, event.animation_repetition)
    raise TypeError(f"unknown iterator event: {event!r}")


class Animator:
    """Plays animations as time advances, one instance per target entity."""

    def __init__(self) -> None:
        self._instances: dict[Hashable, _Instance] = {}

    def update(
        self,
        delta_seconds: float,
        library: LibraryLike,
        targets: Iterable[AnimationTarget],
        emit: Callable[[AnimationEvent], object],
    ) -> None:
        """Advance every target by ``delta_seconds``, passing events to ``emit``."""
        targets = list(targets)
        present = {target.entity for target in targets}
        self._instances = {
            entity: instance
            for entity, instance in self._instances.items()
            if entity in present
        }

        for target in targets:
            elapsed_ms = delta_seconds * target.speed_factor * 1000.0
            if elapsed_ms < 0:
                raise ValueError(f"cannot play time backwards: {elapsed_ms} ms")

            instance = self._instances.get(target.entity)
            if instance is None or instance.animation_id != target.animation_id:
                instance = self._start(target, library, emit)
                self._instances[target.entity] = instance

            if instance.current is not None and target.progress != instance.current[1]:
                try:
                    instance.iterator.seek(target.progress)
                except ValueError:
                    target.progress = instance.current[1]
                else:
                    new = self._play_frame(instance.iterator, target, emit)
                    if new is not None:
                        instance.current = new
                        instance.accumulated_ms = 0.0

            if not target.playing:
                continue

            instance.accumulated_ms += elapsed_ms

            while (
                instance.current is not None
                and instance.accumulated_ms > instance.current[0].duration_ms
            ):
                frame = instance.current[0]
                instance.accumulated_ms -= frame.duration_ms
                instance.current = self._play_frame(instance.iterator, target, emit)
                if instance.current is None:
                    self._emit_end(frame, target, instance.animation_id, emit)

    def _start(
        self,
        target: AnimationTarget,
        library: LibraryLike,
        emit: Callable[[AnimationEvent], object],
    ) -> _Instance:
        iterator = AnimationIterator(AnimationCache.build(target.animation_id, library))
        if target.progress != AnimationProgress():
            try:
                iterator.seek(target.progress)
            except ValueError:
                target.progress = AnimationProgress()
        first = self._play_frame(iterator, target, emit)
        return _Instance(target.animation_id, iterator, first)

    @staticmethod
    def _play_frame(
        iterator: AnimationIterator,
        target: AnimationTarget,
        emit: Callable[[AnimationEvent], object],
    ) -> Optional[_Current]:
        played = next(iterator, None)
        if played is None:
            return None
        frame, progress = played
        if target.atlas_index != frame.atlas_index:
            target.atlas_index = frame.atlas_index
        target.progress = progress
        for event in frame.events:
            emit(_promote(event, target.entity, target.animation_id))
        return played

    @staticmethod
    def _emit_end(
        frame: IteratorFrame,
        target: AnimationTarget,
        animation_id: Hashable,
        emit: Callable[[AnimationEvent], object],
    ) -> None:
        entity = target.entity
        emit(ClipRepetitionEnd(entity, animation_id, frame.clip_id, frame.clip_repetition))
        emit(ClipEnd(entity, animation_id, frame.clip_id))
        emit(AnimationRepetitionEnd(entity, animation_id, frame.animation_repetition))
        emit(AnimationEnd(entity, animation_id))