"""Timeline declarations — what enters when.

These are static configuration: built once per scene, never mutated. The
scheduler turns them into per-time states.

Entry times can be fixed, staggered inside a phase group, or triggered by
another event ("start 0.25s after the zoom starts"). Events reference each
other by name; the scheduler resolves them in dependency order.

Event names:
  <event>             a named event declared in the scene
  <element>.entry     when an element starts animating
  <element>.settled   entry + the element's pop duration
  <group>.start       group start time
  <group>.visible     last member entry + pop duration
  <group>.fade_start  visible + hold (groups with an exit)
  <group>.fade_end    fade_start + fade
  <group>.retired     fade_end + grace
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from src.motion.errors import ConfigurationError

# Default time an element takes to "pop" into place (seconds)
DEFAULT_POP_DURATION = 0.2


@dataclass(frozen=True)
class Trigger:
    """Entry time = resolved time of `event` + `offset`."""

    event: str
    offset: float = 0.0


@dataclass(frozen=True)
class TimelineEvent:
    """A named moment: fixed `at` seconds, or `after` another event + offset."""

    name: str
    at: Optional[float] = None
    after: Optional[str] = None
    offset: float = 0.0

    def __post_init__(self):
        if (self.at is None) == (self.after is None):
            raise ConfigurationError(
                f"Event {self.name!r} needs exactly one of 'at' or 'after'"
            )
        if self.at is not None and self.at < 0:
            raise ConfigurationError(f"Event {self.name!r} has negative time {self.at}")


@dataclass(frozen=True)
class AnimationSpec:
    """One animated element.

    Args:
        identifier: Unique name, also used for `<identifier>.entry` events.
        kind: AnimationKind (see src.animation.kinds).
        entry_time: Fixed entry in seconds. Ignored for group members and
            for elements with a trigger.
        trigger: Optional Trigger overriding the entry time.
        driver: SpringConfig or EasingDriver; None uses the kind default.
        ranges: ChannelRanges with start values; None uses the kind default.
        final_rotation: Rest rotation in degrees.
        opacity: OpacityMode override; None uses the kind default.
        anchor: World-space (x, y) the element is centered on.
        pop_duration: Seconds until the element counts as "in place".
        group: Identifier of the PhaseGroup the element belongs to.
    """

    identifier: str
    kind: object
    entry_time: Optional[float] = None
    trigger: Optional[Trigger] = None
    driver: Optional[object] = None
    ranges: Optional[object] = None
    final_rotation: float = 0.0
    opacity: Optional[object] = None
    anchor: Tuple[float, float] = (0.0, 0.0)
    pop_duration: float = DEFAULT_POP_DURATION
    group: Optional[str] = None

    def __post_init__(self):
        if self.entry_time is not None and self.entry_time < 0:
            raise ConfigurationError(
                f"Element {self.identifier!r} has negative entry time {self.entry_time}"
            )
        if self.pop_duration < 0:
            raise ConfigurationError(
                f"Element {self.identifier!r} has negative pop duration {self.pop_duration}"
            )


@dataclass(frozen=True)
class GroupExit:
    """Hold once every member is in place, then blur + fade the whole group."""

    hold: float = 0.4
    fade: float = 0.3
    max_blur: float = 20.0
    grace: float = 0.3

    def __post_init__(self):
        for name in ("hold", "fade", "max_blur", "grace"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Group exit {name} must be >= 0")


@dataclass(frozen=True)
class PhaseGroup:
    """Members enter at start + index * stagger, optionally leave together."""

    identifier: str
    members: Tuple[str, ...]
    start: float = 0.0
    stagger: float = 0.25
    exit: Optional[GroupExit] = None
    trigger: Optional[Trigger] = None

    def __post_init__(self):
        if self.start < 0:
            raise ConfigurationError(f"Group {self.identifier!r} has negative start {self.start}")
        if self.stagger < 0:
            raise ConfigurationError(
                f"Group {self.identifier!r} has negative stagger interval {self.stagger}"
            )


class Phase(Enum):
    PENDING = "pending"
    ENTERING = "entering"
    HOLDING = "holding"
    FADING = "fading"
    RETIRED = "retired"


@dataclass(frozen=True)
class ElementSchedule:
    """Where one element is on its own timeline at a global time."""

    identifier: str
    active: bool
    local_time: float
    entry_time: float
    fade_opacity: float = 1.0
    fade_blur: float = 0.0


@dataclass(frozen=True)
class GroupState:
    identifier: str
    phase: Phase
    fade_progress: float = 0.0


@dataclass(frozen=True)
class Schedule:
    """Scheduler output for one global time."""

    time: float
    elements: dict = field(default_factory=dict)
    groups: dict = field(default_factory=dict)

    def active_elements(self):
        return [s for s in self.elements.values() if s.active]
