#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the note event records shared by the parser,
the aligner and the structure analyzer, as well as helpers to turn
lists of events into structured note arrays.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple
import numpy as np

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
MIDDLE_C = 60


def midi_to_note_name(midi):
    """
    sharp spelling with scientific octave, e.g. 61 -> "C#4"
    """
    return "{}{}".format(NOTE_NAMES[midi % 12], midi // 12 - 1)


def staff_to_hand(staff):
    """
    grand staff convention: staff 2 is the left hand, everything else right
    """
    return "left" if staff == 2 else "right"


def hand_from_pitch(midi):
    """
    guess a hand for notes without staff information
    """
    return "left" if midi < MIDDLE_C else "right"


@dataclass(frozen=True)
class NotationNoteEvent:
    """A sounding note read from a notation document."""

    id: str
    midi: int
    note_name: str
    start_time: float  # seconds
    duration: float  # seconds, > 0
    hand: str
    staff: int
    measure: int  # 1-based ordinal
    voice: Optional[str] = None

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True)
class PerformanceNoteEvent:
    """A timed note from a performance stream (e.g. a MIDI file)."""

    id: str
    midi: int
    note_name: str
    start_time: float
    duration: float
    velocity: float  # 0-1
    track: int = 0

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True)
class EventSource:
    performance_id: Optional[str] = None
    notation_id: Optional[str] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class UnifiedNoteEvent:
    """A note combining performance timing with notation semantics."""

    id: str
    midi: int
    note_name: str
    start_time: float
    duration: float
    hand: str
    staff: Optional[int] = None
    voice: Optional[str] = None
    measure: Optional[int] = None
    velocity: Optional[float] = None
    source: EventSource = field(default_factory=EventSource)

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True)
class MeasureMapEntry:
    measure: int  # 1-based
    playthrough: int
    start_sec: float
    end_sec: float

    @property
    def duration(self) -> float:
        return self.end_sec - self.start_sec


################################### NOTE ARRAYS ###################################

NOTATION_FIELDS = [
    ("onset_sec", "f8"),
    ("duration_sec", "f8"),
    ("pitch", "i4"),
    ("staff", "i4"),
    ("measure", "i4"),
    ("hand", "U5"),
    ("id", "U256"),
]

PERFORMANCE_FIELDS = [
    ("onset_sec", "f8"),
    ("duration_sec", "f8"),
    ("pitch", "i4"),
    ("velocity", "f4"),
    ("track", "i4"),
    ("id", "U256"),
]

UNIFIED_FIELDS = [
    ("onset_sec", "f8"),
    ("duration_sec", "f8"),
    ("pitch", "i4"),
    ("staff", "i4"),
    ("measure", "i4"),
    ("hand", "U5"),
    ("confidence", "f4"),
    ("id", "U256"),
]


def note_array(events):
    """
    create a structured note array from a list of note events.
    The fields depend on the event type; missing optional
    integers are stored as -1.

    Parameters
    ----------
    events : list
        NotationNoteEvent, PerformanceNoteEvent or UnifiedNoteEvent
        objects (not mixed).

    Returns
    -------
    note_array : structured ndarray
    """
    events = list(events)
    if len(events) == 0 or isinstance(events[0], NotationNoteEvent):
        return np.array(
            [
                (e.start_time, e.duration, e.midi, e.staff, e.measure, e.hand, e.id)
                for e in events
            ],
            dtype=NOTATION_FIELDS,
        )
    if isinstance(events[0], PerformanceNoteEvent):
        return np.array(
            [
                (e.start_time, e.duration, e.midi, e.velocity, e.track, e.id)
                for e in events
            ],
            dtype=PERFORMANCE_FIELDS,
        )
    return np.array(
        [
            (
                e.start_time,
                e.duration,
                e.midi,
                -1 if e.staff is None else e.staff,
                -1 if e.measure is None else e.measure,
                e.hand,
                e.source.confidence,
                e.id,
            )
            for e in events
        ],
        dtype=UNIFIED_FIELDS,
    )


def sort_key(event) -> Tuple[float, int]:
    return (event.start_time, event.midi)


HAND_MODES = ("both", "right-only", "left-only", "mute-right", "mute-left")


def filter_events_by_hand(events, mode="both"):
    """
    keep the events audible/visible under a hand mode:
    both, right-only, left-only, mute-right or mute-left
    """
    if mode == "right-only" or mode == "mute-left":
        return [e for e in events if e.hand == "right"]
    if mode == "left-only" or mode == "mute-right":
        return [e for e in events if e.hand == "left"]
    if mode != "both":
        raise ValueError("unknown hand mode: {}".format(mode))
    return list(events)
