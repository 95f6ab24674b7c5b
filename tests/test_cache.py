from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

from sprite_animator.animation import (
    Animation,
    AnimationDirection,
    AnimationDuration,
    AnimationId,
    AnimationRepeat,
)
from sprite_animator.cache import (
    AnimationCache,
    CacheClipEnd,
    CacheClipRepetitionEnd,
    CacheMarkerHit,
    apply_easing,
)


@dataclass
class FakeClip:
    frames: list
    markers: dict = field(default_factory=dict)
    duration: Optional[AnimationDuration] = None
    repetitions: Optional[int] = None
    direction: Optional[AnimationDirection] = None
    easing: Any = None


@dataclass
class FakeLibrary:
    clips: dict = field(default_factory=dict)
    animations: dict = field(default_factory=dict)

    def get_clip(self, clip_id):
        return self.clips[clip_id]

    def get_animation(self, animation_id):
        return self.animations[animation_id]


def build(animation, **clips):
    library = FakeLibrary(clips=clips, animations={AnimationId(0): animation})
    return AnimationCache.build(AnimationId(0), library)


def atlas(frames):
    return [frame.atlas_index for frame in frames]


def test_default_parameters():
    cache = build(Animation.from_clip("a"), a=FakeClip([1, 2, 3]))
    assert atlas(cache.frames) == [1, 2, 3]
    assert [f.duration_ms for f in cache.frames] == [100, 100, 100]
    assert cache.repetitions is None
    assert cache.frames_pong is None
    assert cache.animation_direction is AnimationDirection.FORWARDS
    assert all(f.events == [] for f in cache.frames)


def test_zero_repetitions_gives_empty_cache():
    anim = Animation.from_clip("a").with_repetitions(AnimationRepeat.count(0))
    cache = build(anim, a=FakeClip([1, 2, 3]))
    assert cache == AnimationCache.empty()
    assert cache.frames == []


def test_clip_without_frames_gives_empty_cache():
    cache = build(Animation.from_clip("a"), a=FakeClip([]))
    assert cache.frames == []
    assert cache.frames_pong is None


def test_zero_duration_gives_empty_cache():
    clip = FakeClip([1, 2], duration=AnimationDuration.per_frame(0))
    cache = build(Animation.from_clip("a"), a=clip)
    assert cache.frames == []


def test_repetition_count_is_kept():
    anim = Animation.from_clip("a").with_repetitions(AnimationRepeat.count(3))
    cache = build(anim, a=FakeClip([1, 2]))
    assert cache.repetitions == 3


def test_clip_repetitions_forwards():
    cache = build(Animation.from_clip("a"), a=FakeClip([1, 2, 3], repetitions=2))
    assert atlas(cache.frames) == [1, 2, 3, 1, 2, 3]
    assert [f.clip_repetition for f in cache.frames] == [0, 0, 0, 1, 1, 1]
    assert cache.frames[3].events == [CacheClipRepetitionEnd("a", 0)]
    assert all(f.events == [] for i, f in enumerate(cache.frames) if i != 3)


def test_clip_backwards():
    clip = FakeClip([1, 2, 3], direction=AnimationDirection.BACKWARDS)
    cache = build(Animation.from_clip("a"), a=clip)
    assert atlas(cache.frames) == [3, 2, 1]


def test_clip_ping_pong():
    clip = FakeClip([1, 2, 3], repetitions=3, direction=AnimationDirection.PING_PONG)
    cache = build(Animation.from_clip("a"), a=clip)
    assert atlas(cache.frames) == [1, 2, 3, 2, 1, 2, 3]
    assert [f.clip_repetition for f in cache.frames] == [0, 0, 0, 1, 1, 2, 2]


def test_two_clips_emit_end_events_in_order():
    cache = build(
        Animation.from_clips(["a", "b"]),
        a=FakeClip([1, 2]),
        b=FakeClip([5, 6]),
    )
    assert atlas(cache.frames) == [1, 2, 5, 6]
    assert [f.clip_id for f in cache.frames] == ["a", "a", "b", "b"]
    assert cache.frames[2].events == [
        CacheClipRepetitionEnd("a", 0),
        CacheClipEnd("a"),
    ]


def test_markers_become_events():
    clip = FakeClip([1, 2, 3], markers={1: ["step"]}, repetitions=2)
    cache = build(Animation.from_clip("a"), a=clip)
    assert cache.frames[1].events == [CacheMarkerHit("step", "a", 0)]
    assert cache.frames[4].events == [CacheMarkerHit("step", "a", 1)]


def test_animation_backwards_reverses_everything():
    anim = Animation.from_clips(["a", "b"]).with_direction(AnimationDirection.BACKWARDS)
    cache = build(anim, a=FakeClip([1, 2]), b=FakeClip([5, 6]))
    assert atlas(cache.frames) == [6, 5, 2, 1]
    assert [f.clip_id for f in cache.frames] == ["b", "b", "a", "a"]
    assert cache.frames_pong is None


def test_animation_ping_pong_has_reversed_pong_frames():
    anim = Animation.from_clips(["a", "b"]).with_direction(AnimationDirection.PING_PONG)
    cache = build(anim, a=FakeClip([1, 2]), b=FakeClip([5, 6]))
    assert atlas(cache.frames) == [1, 2, 5, 6]
    assert atlas(cache.frames_pong) == [6, 5, 2, 1]
    assert cache.animation_direction is AnimationDirection.PING_PONG


def test_animation_per_frame_overrides_clip_duration():
    anim = Animation.from_clip("a").with_duration(AnimationDuration.per_frame(40))
    clip = FakeClip([1, 2, 3], duration=AnimationDuration.per_frame(500))
    cache = build(anim, a=clip)
    assert [f.duration_ms for f in cache.frames] == [40, 40, 40]


def test_animation_per_repetition_is_shared_between_clips():
    anim = Animation.from_clips(["a", "b"]).with_duration(
        AnimationDuration.per_repetition(1000)
    )
    cache = build(anim, a=FakeClip([1, 2]), b=FakeClip([3, 4]))
    durations = [f.duration_ms for f in cache.frames]
    assert sum(durations) == 1000
    assert len(set(durations)) == 1


def test_clip_per_repetition_spreads_over_frames():
    clip = FakeClip([1, 2, 3], duration=AnimationDuration.per_repetition(300))
    cache = build(Animation.from_clip("a"), a=clip)
    durations = [f.duration_ms for f in cache.frames]
    assert sum(durations) == 300
    assert len(set(durations)) == 1


def test_apply_easing_linear_is_identity():
    assert apply_easing([10, 20, 30], None) == [10, 20, 30]


def test_apply_easing_zero_total_is_unchanged():
    assert apply_easing([0, 0], lambda t: t * t) == [0, 0]


def test_apply_easing_quadratic_accelerates():
    eased = apply_easing([100] * 5, lambda t: t * t)
    assert len(eased) == 5
    assert eased[0] == 0
    assert eased == sorted(eased)
    assert sum(eased) <= 500


def test_animation_easing_applied_to_cache():
    anim = Animation.from_clip("a").with_easing(lambda t: t * t)
    cache = build(anim, a=FakeClip([1, 2, 3, 4]))
    durations = [f.duration_ms for f in cache.frames]
    assert durations == sorted(durations)
    assert durations[0] == 0


def test_missing_clip_raises():
    with pytest.raises(KeyError):
        build(Animation.from_clip("missing"), a=FakeClip([1]))