#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the greedy pitch-first aligner that fuses a
performance stream (timing) with notation events (semantics).
"""
import time
from dataclasses import dataclass

import numpy as np

from ..notes import (
    EventSource,
    UnifiedNoteEvent,
    hand_from_pitch,
    note_array,
    sort_key,
)

MAX_TIME_DELTA = 0.35
CHORD_WINDOW = 0.02
PITCH_MATCH_SCORE = 0.6
TIME_PROXIMITY_SCORE = 0.34
SEQUENCE_CONFIDENCE = 0.4
STANDALONE_CONFIDENCE = 0.2


@dataclass(frozen=True)
class AlignmentStats:
    performance_count: int
    notation_count: int
    matched_count: int
    time_matched: int
    sequence_matched: int
    unmatched_performance: int
    unmatched_notation: int
    mean_confidence: float


def pitch_buckets(score_note_array):
    """
    indices of the notation notes per pitch, each in onset order
    """
    order = np.argsort(score_note_array["onset_sec"], kind="stable")
    pitches = score_note_array["pitch"][order]
    return {int(pitch): order[pitches == pitch] for pitch in np.unique(pitches)}


class GreedyPitchAligner(object):
    """
    Greedy, pitch-first alignment of performance notes to notation notes.

    Every performance note (in onset order) takes the best unconsumed
    notation note of the same pitch within max_time_delta, scored
    0.6 + 0.34 * (1 - delta / max_time_delta). Without such a candidate
    the next unconsumed notation note of that pitch is taken (confidence
    0.4), otherwise the performance note stays alone (confidence 0.2).
    Notation notes never consumed are appended with notation timing
    (confidence 0.2).

    Parameters
    ----------
    max_time_delta : float
        onset window in seconds for time-proximate matches.
    chord_window : float
        reserved for chord grouping, currently unused in scoring.
    prefer_longer_duration : bool
        use the longer of the two durations for matched notes.
    """

    def __init__(
        self,
        max_time_delta=MAX_TIME_DELTA,
        chord_window=CHORD_WINDOW,
        prefer_longer_duration=False,
        verbose=False,
    ):
        if max_time_delta <= 0:
            raise ValueError("max_time_delta needs to be positive")
        self.max_time_delta = max_time_delta
        self.chord_window = chord_window
        self.prefer_longer_duration = prefer_longer_duration
        self.verbose = verbose

    def time_score(self, delta):
        proximity = max(0.0, 1.0 - delta / self.max_time_delta)
        return min(1.0, PITCH_MATCH_SCORE + TIME_PROXIMITY_SCORE * proximity)

    def unify(self, p_note, s_note, confidence):
        duration = p_note.duration
        if self.prefer_longer_duration:
            duration = max(p_note.duration, s_note.duration)
        return UnifiedNoteEvent(
            id="u-m-{}-{}".format(p_note.id, s_note.id),
            midi=p_note.midi,
            note_name=p_note.note_name,
            start_time=p_note.start_time,
            duration=duration,
            hand=s_note.hand,
            staff=s_note.staff,
            voice=s_note.voice,
            measure=s_note.measure,
            velocity=p_note.velocity,
            source=EventSource(p_note.id, s_note.id, confidence),
        )

    def __call__(self, performance_events, notation_events):
        """
        Parameters
        ----------
        performance_events : list
            PerformanceNoteEvent objects
        notation_events : list
            NotationNoteEvent objects

        Returns
        -------
        unified : list
            UnifiedNoteEvent objects sorted by (start_time, midi)
        stats : AlignmentStats
        """
        t1 = time.time()
        performance_events = list(performance_events)
        notation_events = list(notation_events)
        score_note_array = note_array(notation_events)
        perf_note_array = note_array(performance_events)
        buckets = pitch_buckets(score_note_array)
        consumed = np.zeros(len(notation_events), dtype=bool)
        next_in_sequence = dict()

        unified = []
        time_matched = 0
        sequence_matched = 0
        for p_idx in np.argsort(perf_note_array["onset_sec"], kind="stable"):
            p_note = performance_events[p_idx]
            candidates = buckets.get(p_note.midi)

            if candidates is not None:
                free = candidates[~consumed[candidates]]
                deltas = np.abs(score_note_array["onset_sec"][free] - p_note.start_time)
                within = deltas <= self.max_time_delta
                if np.any(within):
                    scores = [self.time_score(delta) for delta in deltas[within]]
                    best = int(free[within][int(np.argmax(scores))])
                    consumed[best] = True
                    time_matched += 1
                    unified.append(
                        self.unify(p_note, notation_events[best], max(scores))
                    )
                    continue

                # no time-proximate candidate: next unconsumed note of this pitch
                position = next_in_sequence.get(p_note.midi, 0)
                while position < len(candidates) and consumed[candidates[position]]:
                    position += 1
                if position < len(candidates):
                    best = int(candidates[position])
                    consumed[best] = True
                    next_in_sequence[p_note.midi] = position + 1
                    sequence_matched += 1
                    unified.append(
                        self.unify(p_note, notation_events[best], SEQUENCE_CONFIDENCE)
                    )
                    continue

            unified.append(
                UnifiedNoteEvent(
                    id="u-m-{}".format(p_note.id),
                    midi=p_note.midi,
                    note_name=p_note.note_name,
                    start_time=p_note.start_time,
                    duration=p_note.duration,
                    hand=hand_from_pitch(p_note.midi),
                    velocity=p_note.velocity,
                    source=EventSource(p_note.id, None, STANDALONE_CONFIDENCE),
                )
            )

        unmatched_notation = 0
        for s_idx in np.flatnonzero(~consumed):
            s_note = notation_events[s_idx]
            unmatched_notation += 1
            unified.append(
                UnifiedNoteEvent(
                    id="u-x-{}".format(s_note.id),
                    midi=s_note.midi,
                    note_name=s_note.note_name,
                    start_time=s_note.start_time,
                    duration=s_note.duration,
                    hand=s_note.hand,
                    staff=s_note.staff,
                    voice=s_note.voice,
                    measure=s_note.measure,
                    source=EventSource(None, s_note.id, STANDALONE_CONFIDENCE),
                )
            )

        unified.sort(key=sort_key)
        matched = time_matched + sequence_matched
        stats = AlignmentStats(
            performance_count=len(performance_events),
            notation_count=len(notation_events),
            matched_count=matched,
            time_matched=time_matched,
            sequence_matched=sequence_matched,
            unmatched_performance=len(performance_events) - matched,
            unmatched_notation=unmatched_notation,
            mean_confidence=float(np.mean([u.source.confidence for u in unified]))
            if unified
            else 0.0,
        )
        if self.verbose:
            print(format(time.time() - t1, ".3f"), "sec : Greedy pitch alignment")
            print("matched", matched, "of", len(performance_events), "performance notes")
        return unified, stats


def align_events(
    performance_events,
    notation_events,
    max_time_delta=MAX_TIME_DELTA,
    chord_window=CHORD_WINDOW,
    prefer_longer_duration=False,
):
    aligner = GreedyPitchAligner(max_time_delta, chord_window, prefer_longer_duration)
    return aligner(performance_events, notation_events)
