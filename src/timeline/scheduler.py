"""Timeline scheduler — global time to per-element local time.

build_timeline() resolves every entry time once, when the scene is loaded:
fixed entries, phase-group staggers and event triggers all become plain
seconds. Triggers form a dependency graph ("bubble starts 0.25s after
zoom_start, zoom_start is 0.5s after finally.entry, ...") which is walked
in topological order, so declaration order in the scene file never matters.
Missing targets and cycles fail here, before any frame is evaluated.

Timeline.resolve(t) is then a pure lookup: nothing is carried from one
query to the next.
"""

import logging
from graphlib import CycleError, TopologicalSorter

from src.motion.errors import ConfigurationError
from src.timeline.models import (
    ElementSchedule,
    GroupState,
    Phase,
    Schedule,
)

logger = logging.getLogger(__name__)


def _label(owner):
    return owner[:1].upper() + owner[1:]


def _check_unique(kind, identifiers):
    seen = set()
    for identifier in identifiers:
        if identifier in seen:
            raise ConfigurationError(f"Duplicate {kind} identifier {identifier!r}")
        seen.add(identifier)


def _membership(specs, groups):
    """Map element identifier -> (group, index in group)."""
    known = {spec.identifier for spec in specs}
    membership = {}
    for group in groups:
        for index, member in enumerate(group.members):
            if member not in known:
                raise ConfigurationError(
                    f"Group {group.identifier!r} member {index} references unknown element {member!r}"
                )
            if member in membership:
                other = membership[member][0].identifier
                raise ConfigurationError(
                    f"Element {member!r} is a member of both {other!r} and {group.identifier!r}"
                )
            membership[member] = (group, index)

    for spec in specs:
        if spec.group is None:
            continue
        group = membership.get(spec.identifier, (None, None))[0]
        if group is None or group.identifier != spec.group:
            raise ConfigurationError(
                f"Element {spec.identifier!r} names group {spec.group!r} but is not one of its members"
            )
    return membership


def _build_graph(specs, groups, events, membership):
    """Dependency graph + one compute function per event name.

    Returns:
        (graph, rules, owners) where graph maps name -> set of names it
        depends on, rules maps name -> fn(times) -> seconds, and owners
        maps name -> a label for error messages.
    """
    graph, rules, owners = {}, {}, {}

    def add(name, deps, rule, owner):
        if name in graph:
            raise ConfigurationError(f"Event name {name!r} ({owner}) is already defined")
        graph[name] = set(deps)
        rules[name] = rule
        owners[name] = owner

    for event in events:
        owner = f"event {event.name!r}"
        if event.after is not None:
            add(event.name, [event.after],
                lambda times, e=event: times[e.after] + e.offset, owner)
        else:
            add(event.name, [], lambda times, e=event: e.at + e.offset, owner)

    for group in groups:
        owner = f"group {group.identifier!r}"
        gid = group.identifier
        if group.trigger is not None:
            trig = group.trigger
            add(f"{gid}.start", [trig.event],
                lambda times, tr=trig: times[tr.event] + tr.offset, owner)
        else:
            add(f"{gid}.start", [], lambda times, g=group: g.start, owner)

    for spec in specs:
        owner = f"element {spec.identifier!r}"
        sid = spec.identifier
        if spec.trigger is not None:
            trig = spec.trigger
            add(f"{sid}.entry", [trig.event],
                lambda times, tr=trig: times[tr.event] + tr.offset, owner)
        elif sid in membership:
            group, index = membership[sid]
            add(f"{sid}.entry", [f"{group.identifier}.start"],
                lambda times, g=group, i=index: times[f"{g.identifier}.start"] + i * g.stagger,
                owner)
        elif spec.entry_time is not None:
            add(f"{sid}.entry", [], lambda times, s=spec: s.entry_time, owner)
        else:
            raise ConfigurationError(
                f"Element {sid!r} needs an entry_time, a trigger or a group"
            )
        add(f"{sid}.settled", [f"{sid}.entry"],
            lambda times, s=spec: times[f"{s.identifier}.entry"] + s.pop_duration, owner)

    settled_by_id = {spec.identifier: spec.pop_duration for spec in specs}
    for group in groups:
        owner = f"group {group.identifier!r}"
        gid = group.identifier
        member_entries = [f"{m}.entry" for m in group.members]

        def visible(times, g=group, entries=member_entries):
            if not entries:
                return times[f"{g.identifier}.start"]
            return max(times[f"{m}.entry"] + settled_by_id[m] for m in g.members)

        add(f"{gid}.visible", member_entries + [f"{gid}.start"], visible, owner)

        if group.exit is not None:
            ex = group.exit
            add(f"{gid}.fade_start", [f"{gid}.visible"],
                lambda times, g=gid, x=ex: times[f"{g}.visible"] + x.hold, owner)
            add(f"{gid}.fade_end", [f"{gid}.fade_start"],
                lambda times, g=gid, x=ex: times[f"{g}.fade_start"] + x.fade, owner)
            add(f"{gid}.retired", [f"{gid}.fade_end"],
                lambda times, g=gid, x=ex: times[f"{g}.fade_end"] + x.grace, owner)

    for name, deps in graph.items():
        for dep in deps:
            if dep not in graph:
                raise ConfigurationError(
                    f"{_label(owners[name])} references unknown event {dep!r}"
                )
    return graph, rules, owners


def resolve_event_times(specs, groups=(), events=()):
    """Resolve every event name to seconds, in dependency order.

    Raises:
        ConfigurationError: duplicates, unknown references, dependency
            cycles or a resolved time below zero.
    """
    _check_unique("element", [s.identifier for s in specs])
    _check_unique("group", [g.identifier for g in groups])
    _check_unique("event", [e.name for e in events])
    membership = _membership(specs, groups)
    graph, rules, owners = _build_graph(specs, groups, events, membership)

    try:
        order = list(TopologicalSorter(graph).static_order())
    except CycleError as exc:
        cycle = " -> ".join(exc.args[1])
        raise ConfigurationError(f"Trigger dependency cycle: {cycle}") from exc

    times = {}
    for name in order:
        times[name] = rules[name](times)
        if times[name] < 0:
            raise ConfigurationError(
                f"{_label(owners[name])} resolves {name!r} to negative time {times[name]}"
            )
    return times


class Timeline:
    """Resolved entry times for a scene's elements and groups.

    Args:
        specs: AnimationSpec list.
        groups: PhaseGroup list.
        events: TimelineEvent list.
    """

    __slots__ = ("specs", "groups", "event_times", "_membership")

    def __init__(self, specs, groups=(), events=()):
        self.specs = tuple(specs)
        self.groups = tuple(groups)
        self.event_times = resolve_event_times(self.specs, self.groups, tuple(events))
        self._membership = {
            member: group
            for group in self.groups
            for member in group.members
        }

    def event_time(self, name):
        """Resolved seconds for an event name (see src.timeline.models)."""
        try:
            return self.event_times[name]
        except KeyError:
            raise ConfigurationError(f"Unknown event {name!r}") from None

    def entry_time(self, identifier):
        return self.event_time(f"{identifier}.entry")

    def duration(self):
        """Time by which every element has settled and every exit has finished."""
        if not self.event_times:
            return 0.0
        return max(self.event_times.values())

    def group_state(self, group, time):
        """Phase of `group` at `time`."""
        times = self.event_times
        gid = group.identifier
        first_entry = min(
            (times[f"{m}.entry"] for m in group.members),
            default=times[f"{gid}.start"],
        )
        if time < first_entry:
            return GroupState(gid, Phase.PENDING)
        if time < times[f"{gid}.visible"]:
            return GroupState(gid, Phase.ENTERING)
        if group.exit is None or time < times[f"{gid}.fade_start"]:
            return GroupState(gid, Phase.HOLDING)
        if time >= times[f"{gid}.retired"]:
            return GroupState(gid, Phase.RETIRED, 1.0)

        fade_start = times[f"{gid}.fade_start"]
        fade = group.exit.fade
        progress = 1.0 if fade <= 0 else min(1.0, (time - fade_start) / fade)
        return GroupState(gid, Phase.FADING, progress)

    def resolve(self, time):
        """Schedule for every element and group at global `time` (seconds).

        Returns:
            Schedule. Elements before their entry time, or in a retired
            group, are inactive and must be left out of composition.
        """
        groups = {g.identifier: self.group_state(g, time) for g in self.groups}

        elements = {}
        for spec in self.specs:
            sid = spec.identifier
            entry = self.event_times[f"{sid}.entry"]
            if time < entry:
                elements[sid] = ElementSchedule(sid, False, 0.0, entry)
                continue

            fade_opacity, fade_blur = 1.0, 0.0
            group = self._membership.get(sid)
            if group is not None:
                state = groups[group.identifier]
                if state.phase is Phase.RETIRED:
                    elements[sid] = ElementSchedule(sid, False, time - entry, entry, 0.0, group.exit.max_blur)
                    continue
                if state.phase is Phase.FADING:
                    fade_opacity = 1.0 - state.fade_progress
                    fade_blur = state.fade_progress * group.exit.max_blur

            elements[sid] = ElementSchedule(sid, True, time - entry, entry, fade_opacity, fade_blur)

        return Schedule(time=time, elements=elements, groups=groups)


def build_timeline(specs, groups=(), events=()):
    """Validate and resolve a scene timeline.

    Raises:
        ConfigurationError: see resolve_event_times().
    """
    timeline = Timeline(specs, groups, events)
    for spec in timeline.specs:
        logger.debug("Element %s enters at %.3fs", spec.identifier, timeline.entry_time(spec.identifier))
    logger.info(
        "Timeline resolved: %d elements, %d groups, %.2fs total",
        len(timeline.specs), len(timeline.groups), timeline.duration(),
    )
    return timeline
