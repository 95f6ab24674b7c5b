# sprite_animator

Plays spritesheet animations frame by frame. An animation is a sequence of
one or more clips, each clip a sequence of atlas indices. Clips and the
animation as a whole can carry a duration, a repetition count, a direction
and an easing. The package works out which atlas index to show as time
passes and reports what happened along the way as events.

It has no dependencies outside the standard library.

## Install

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Modules

- `sprite_animator.animation` – `AnimationId`, `AnimationDuration`
  (`per_frame(ms)`, `per_repetition(ms)`), `DurationKind`, `AnimationRepeat`
  (`loop()`, `count(n)`), `AnimationDirection` (`FORWARDS`, `BACKWARDS`,
  `PING_PONG`) and the immutable `Animation`.
- `sprite_animator.cache` – `AnimationCache`, which flattens an animation and
  its clips into a list of `CacheFrame`s, and `apply_easing`.
- `sprite_animator.iterator` – `AnimationIterator`, which walks a cache and
  yields `(IteratorFrame, AnimationProgress)` pairs.
- `sprite_animator.animator` – `Animator`, which advances `AnimationTarget`s
  over time and emits events.

## Describing an animation

`Animation` is a frozen dataclass; the `with_*` methods return a modified copy.

```python
from sprite_animator.animation import (
    Animation,
    AnimationDirection,
    AnimationDuration,
    AnimationRepeat,
)

animation = (
    Animation.from_clips(["idle", "run", "shoot"])
    .with_duration(AnimationDuration.per_repetition(2000))
    .with_repetitions(AnimationRepeat.count(5))
    .with_direction(AnimationDirection.PING_PONG)
)
```

Clip and animation ids can be any hashable value (`AnimationId` is provided
for convenience). Durations are whole milliseconds; a negative or
non-integer duration, or a negative repetition count, raises an error.

Defaults, when a parameter is not given:

- duration: `AnimationDuration.per_frame(100)`
- repetitions: `AnimationRepeat.loop()` for an animation, once for a clip
- direction: forwards
- easing: none (linear timing)

A per-frame duration set on the animation overrides the clips' own frame
durations. A per-repetition duration set on the animation is shared out
between the clips in proportion to their own lengths.

An easing is either `None`, a callable, or an object with a `get(t)` method,
mapping normalised time in `[0, 1]` onto `[0, 1]`.
`apply_easing(durations, easing)` returns the list of frame durations
redistributed along that curve.

## Supplying clips and a library

The cache reads animations and clips through two small protocols
(`sprite_animator.cache.LibraryLike` and `ClipLike`):

- a library has `get_animation(animation_id)` returning an `Animation` and
  `get_clip(clip_id)` returning a clip;
- a clip has `frames` (atlas indices), `markers` (a mapping from frame
  position to marker ids), and `duration`, `repetitions` (an int),
  `direction` and `easing`, each of which may be `None`.

```python
from dataclasses import dataclass, field

from sprite_animator.animation import Animation, AnimationRepeat
from sprite_animator.animator import Animator, AnimationTarget


@dataclass
class Clip:
    frames: list
    markers: dict = field(default_factory=dict)
    duration: object = None
    repetitions: object = None
    direction: object = None
    easing: object = None


class Library:
    def __init__(self):
        self.clips = {"walk": Clip([0, 1, 2, 3], markers={1: ["step"]})}
        self.animations = {
            "walk": Animation.from_clip("walk").with_repetitions(AnimationRepeat.count(1))
        }

    def get_animation(self, animation_id):
        return self.animations[animation_id]

    def get_clip(self, clip_id):
        return self.clips[clip_id]


events = []
animator = Animator()
target = AnimationTarget(entity="hero", animation_id="walk")
animator.update(0.25, Library(), [target], events.append)
print(target.atlas_index)  # 2
```

## How playback works

- `AnimationCache.build(animation_id, library)` resolves every parameter into
  one list of frames, each with its atlas index, its duration in
  milliseconds and the events it raises (marker hits, clip repetition ends,
  clip ends). Ping-pong animations also get a reversed frame list,
  `frames_pong`, for odd repetitions. Clips with no frames, no repetitions or
  a zero duration are dropped; an animation that repeats zero times or lasts
  zero milliseconds yields an empty cache (`AnimationCache.empty()`).
- `AnimationIterator(cache)` is a Python iterator over
  `(IteratorFrame, AnimationProgress)` pairs; it stops after the last frame
  of a finite animation and never stops for a looping one. After the first
  repetition of a ping-pong animation the repeated turning frame is skipped.
  `seek(progress)` jumps to a given frame and repetition and raises
  `ValueError` when the progress lies outside the animation.
- `Animator.update(delta_seconds, library, targets, emit)` keeps one running
  iterator per target entity and drops those of entities no longer passed
  in. It advances every playing target by the elapsed time multiplied by its
  `speed_factor` (negative elapsed time raises `ValueError`), writes the
  current `atlas_index` and `progress` back to the target, and passes each
  event to `emit`: `MarkerHit`, `ClipRepetitionEnd`, `ClipEnd`,
  `AnimationRepetitionEnd` and, once a finite animation has played its last
  frame, `AnimationEnd`.

A paused target (`playing=False`) still gets its first frame. Changing a
target's `animation_id` starts that animation afresh. Writing a new
`progress` makes the animator jump there on the next update; an invalid
progress is reverted to the current one (or to the start when a new
animation begins).

## What this package does not do

It draws nothing and loads no images: it only computes atlas indices and
events. It provides no registry of clips and animations, no clip type, no
spritesheet helpers for picking frame indices out of a grid, and no
ready-made easing curves; the caller supplies those objects in the shapes
described above.

## Running the tests

```
pytest
```