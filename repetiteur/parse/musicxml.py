#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the MusicXML reader. It turns partwise or
timewise documents into tie-merged note events in seconds and a
measure map.
"""
import math
import time
from dataclasses import dataclass, replace
from typing import List, Tuple
import xml.etree.ElementTree as ET

from ..notes import (
    MeasureMapEntry,
    NotationNoteEvent,
    midi_to_note_name,
    sort_key,
    staff_to_hand,
)
from .container import read_document_file, read_document_text, strip_namespaces
from .errors import EmptyScoreError, NotMusicXMLError, UnsupportedRootError

DEFAULT_BPM = 90.0
STEP_TO_SEMITONE = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
EPS = 1e-9


@dataclass(frozen=True)
class ParseStats:
    notes: int
    grace_notes: int
    ties_merged: int
    ornaments: int
    unique_measures: int
    tempo_changes: int


@dataclass(frozen=True)
class ParseResult:
    events: List[NotationNoteEvent]
    duration: float
    measure_map: List[MeasureMapEntry]
    tempo_bpm: float
    time_signature: Tuple[int, int]
    stats: ParseStats


def duration_to_seconds(duration_divisions, divisions_per_quarter, bpm):
    """
    seconds = (60 / bpm) * (divisions / divisions per quarter)
    """
    return (60.0 / bpm) * (duration_divisions / divisions_per_quarter)


def pitch_to_midi(step, alter, octave):
    return int(round((octave + 1) * 12 + STEP_TO_SEMITONE[step] + alter))


def _number(text, fallback=0.0):
    if text is None:
        return fallback
    try:
        value = float(text.strip())
    except ValueError:
        return fallback
    return value if math.isfinite(value) else fallback


def _beats(text):
    # composite meters such as "3+2"
    if text is None:
        return 0.0
    return sum(_number(part) for part in text.split("+"))


def _read_pitch(pitch):
    """
    MIDI number of a <pitch> element, None if step or octave is unusable
    """
    if pitch is None:
        return None
    step = (pitch.findtext("step") or "").strip().upper()
    octave = _number(pitch.findtext("octave"), float("nan"))
    if step not in STEP_TO_SEMITONE or math.isnan(octave):
        return None
    midi = pitch_to_midi(step, _number(pitch.findtext("alter")), octave)
    if not 0 <= midi <= 127:
        return None
    return midi


def _tie_markers(note):
    """
    (start, stop) flags from <tie> and <notations><tied>
    """
    types = [tie.get("type") for tie in note.findall("tie")]
    types += [tied.get("type") for tied in note.findall("notations/tied")]
    return "start" in types, "stop" in types


def merge_tied_notes(events, ties):
    """
    merge tied note events into single sustained events.

    Events are keyed by (staff, pitch). A pure "start" opens a pending
    event. Every later event of the same key extends it, tied or not,
    and only a pure "stop" closes it. Unclosed ties are kept as they are.

    Parameters
    ----------
    events : list
        NotationNoteEvent objects sorted by onset
    ties : list
        (start, stop) tie flags per event

    Returns
    -------
    merged : list
        merged events sorted by (start_time, midi)
    ties_merged : int
        number of events absorbed into a preceding tied event
    """
    merged = []
    pending = {}
    ties_merged = 0
    for event, (start, stop) in zip(events, ties):
        key = (event.staff, event.midi)
        opened = pending.get(key)

        if opened is None:
            if start and not stop:
                pending[key] = event
            else:
                merged.append(event)
            continue

        end = max(opened.end_time, event.end_time)
        opened = replace(opened, duration=end - opened.start_time)
        ties_merged += 1
        if stop and not start:
            merged.append(opened)
            del pending[key]
        else:
            pending[key] = opened

    merged.extend(pending.values())
    merged.sort(key=sort_key)
    return merged, ties_merged


class PartState(object):
    """
    running state of one part: cursor, divisions, tempo and meter
    """

    def __init__(self, part_id, bpm):
        self.part_id = part_id
        self.cursor = 0.0
        self.last_onset = 0.0
        self.divisions = 1.0
        self.bpm = bpm
        self.time_signature = (4, 4)
        self.measure_start = 0.0
        self.measure_extent = 0.0

    def seconds(self, element):
        duration = _number(element.findtext("duration"))
        return duration_to_seconds(duration, self.divisions, self.bpm)


class ScoreWalker(object):
    """
    Walks one document. The partwise and timewise drivers differ only in
    nesting order; both hand every measure child to the same per-tag
    handlers.
    """

    def __init__(self, fallback_bpm):
        self.fallback_bpm = fallback_bpm
        self.events = []
        self.ties = []
        self.measure_spans = []
        self.map_part_id = None
        self.grace_notes = 0
        self.ornaments = 0
        self.tempo_changes = 0
        self.detected_tempo = None
        self.time_signature = None
        self.handlers = {
            "attributes": self.on_attributes,
            "backup": self.on_backup,
            "forward": self.on_forward,
            "note": self.on_note,
            "direction": self.on_direction,
            "sound": self.on_sound,
        }

    ################################### DRIVERS ###################################

    def walk_partwise(self, root):
        parts = root.findall("part")
        if len(parts) == 0:
            raise EmptyScoreError("No <part> found")
        measure_count = 0
        for part_no, part in enumerate(parts):
            state = PartState(part.get("id", "P{}".format(part_no + 1)), self.fallback_bpm)
            measures = part.findall("measure")
            for ordinal, measure in enumerate(measures, start=1):
                self.walk_measure(state, measure, ordinal, measure.get("number"))
            measure_count = max(measure_count, len(measures))
        if measure_count == 0:
            raise EmptyScoreError("No <measure> found")

    def walk_timewise(self, root):
        measures = root.findall("measure")
        if len(measures) == 0:
            raise EmptyScoreError("No <measure> found")
        states = {}
        for ordinal, measure in enumerate(measures, start=1):
            for part in measure.findall("part"):
                part_id = part.get("id", "P1")
                if part_id not in states:
                    states[part_id] = PartState(part_id, self.fallback_bpm)
                self.walk_measure(states[part_id], part, ordinal, measure.get("number"))
        if len(states) == 0:
            raise EmptyScoreError("No <part> found")

    def walk_measure(self, state, container, ordinal, number):
        if self.map_part_id is None:
            self.map_part_id = state.part_id
        state.measure_start = state.cursor
        state.measure_extent = state.cursor
        for element in container:
            handler = self.handlers.get(element.tag)
            if handler is not None:
                handler(state, element, ordinal)
                state.measure_extent = max(state.measure_extent, state.cursor)

        end = state.measure_extent
        if end <= state.measure_start + EPS:
            # no timed content: use the nominal bar length
            beats, beat_type = state.time_signature
            end = state.measure_start + duration_to_seconds(
                beats * 4.0 / beat_type, 1.0, state.bpm
            )
        state.cursor = end
        if state.part_id == self.map_part_id:
            self.measure_spans.append((ordinal, number, state.measure_start, end))

    ################################### HANDLERS ###################################

    def on_attributes(self, state, element, ordinal):
        divisions = _number(element.findtext("divisions"))
        if divisions > 0:
            state.divisions = divisions
        meter = element.find("time")
        if meter is not None:
            beats = _beats(meter.findtext("beats"))
            beat_type = _number(meter.findtext("beat-type"))
            if beats > 0 and beat_type > 0:
                state.time_signature = (int(beats), int(beat_type))
                if self.time_signature is None:
                    self.time_signature = state.time_signature

    def on_backup(self, state, element, ordinal):
        state.cursor = max(0.0, state.cursor - state.seconds(element))

    def on_forward(self, state, element, ordinal):
        state.cursor += state.seconds(element)

    def on_direction(self, state, element, ordinal):
        for sound in element.iter("sound"):
            self.on_sound(state, sound, ordinal)

    def on_sound(self, state, element, ordinal):
        tempo = _number(element.get("tempo"))
        if tempo <= 0:
            return
        if self.detected_tempo is None:
            self.detected_tempo = tempo
        if tempo != state.bpm and state.part_id == self.map_part_id:
            self.tempo_changes += 1
        state.bpm = tempo

    def on_note(self, state, element, ordinal):
        ornaments = element.find("notations/ornaments")
        if ornaments is not None:
            self.ornaments += len(ornaments)
        if element.find("grace") is not None:
            self.grace_notes += 1
            return

        duration = state.seconds(element)
        if duration <= 0:
            return
        is_chord = element.find("chord") is not None
        if is_chord:
            onset = state.last_onset
        else:
            onset = state.cursor
            state.last_onset = onset
            state.cursor += duration

        if element.find("rest") is not None:
            return
        midi = _read_pitch(element.find("pitch"))
        if midi is None:
            return

        staff = int(_number(element.findtext("staff"), 1.0))
        voice = element.findtext("voice")
        self.events.append(
            NotationNoteEvent(
                id="{}-m{}-n{}".format(state.part_id, ordinal, len(self.events)),
                midi=midi,
                note_name=midi_to_note_name(midi),
                start_time=onset,
                duration=duration,
                hand=staff_to_hand(staff),
                staff=staff,
                measure=ordinal,
                voice=voice.strip() if voice is not None else None,
            )
        )
        self.ties.append(_tie_markers(element))

    ################################### RESULTS ###################################

    def measure_map(self):
        measure_map = []
        seen = {}
        for ordinal, number, start, end in self.measure_spans:
            key = number if number is not None else str(ordinal)
            playthrough = seen.get(key, 0)
            seen[key] = playthrough + 1
            measure_map.append(MeasureMapEntry(ordinal, playthrough, start, end))
        return measure_map, len(seen)


class MusicXMLParser(object):
    """
    Parse MusicXML documents (bare or packaged as .mxl) into note events.

    Parameters
    ----------
    fallback_bpm : float
        tempo used until the first tempo directive, defaults to 90.
    verbose : bool
        print stage timings.
    """

    def __init__(self, fallback_bpm=DEFAULT_BPM, verbose=False):
        if fallback_bpm <= 0:
            raise ValueError("fallback_bpm needs to be positive")
        self.fallback_bpm = float(fallback_bpm)
        self.verbose = verbose

    def parse_root(self, text):
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise NotMusicXMLError("Malformed MusicXML: {}".format(e)) from e
        return strip_namespaces(root)

    def __call__(self, data):
        """
        Parameters
        ----------
        data : bytes or str
            document content, optionally a compressed package

        Returns
        -------
        result : ParseResult
        """
        t1 = time.time()
        root = self.parse_root(read_document_text(data))
        walker = ScoreWalker(self.fallback_bpm)
        if root.tag == "score-partwise":
            walker.walk_partwise(root)
        elif root.tag == "score-timewise":
            walker.walk_timewise(root)
        else:
            raise UnsupportedRootError(
                "Unsupported MusicXML root <{}> (expected score-partwise "
                "or score-timewise)".format(root.tag)
            )
        t2 = time.time()

        order = sorted(range(len(walker.events)), key=lambda i: sort_key(walker.events[i]))
        events, ties_merged = merge_tied_notes(
            [walker.events[i] for i in order], [walker.ties[i] for i in order]
        )
        measure_map, unique_measures = walker.measure_map()
        t3 = time.time()
        if self.verbose:
            print(format(t2 - t1, ".3f"), "sec : Document walk")
            print(format(t3 - t2, ".3f"), "sec : Tie merging")

        duration = max((e.end_time for e in events), default=0.0)
        return ParseResult(
            events=events,
            duration=duration,
            measure_map=measure_map,
            tempo_bpm=walker.detected_tempo or self.fallback_bpm,
            time_signature=walker.time_signature or (4, 4),
            stats=ParseStats(
                notes=len(events),
                grace_notes=walker.grace_notes,
                ties_merged=ties_merged,
                ornaments=walker.ornaments,
                unique_measures=unique_measures,
                tempo_changes=walker.tempo_changes,
            ),
        )


def parse_musicxml(data, fallback_bpm=DEFAULT_BPM, extended=False):
    """
    parse MusicXML content.

    Returns (events, duration), or the full ParseResult with
    measure map, tempo, meter and statistics if extended is set.
    """
    result = MusicXMLParser(fallback_bpm)(data)
    if extended:
        return result
    return result.events, result.duration


def load_musicxml(path, fallback_bpm=DEFAULT_BPM, extended=False):
    return parse_musicxml(read_document_file(path), fallback_bpm, extended)
