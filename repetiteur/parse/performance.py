#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to load performance streams
(timed notes without notation semantics) from MIDI files.
"""
import numpy as np
import partitura as pt

from ..notes import PerformanceNoteEvent, midi_to_note_name, sort_key


def performance_events_from_note_array(performance_note_array):
    """
    create performance events from a structured performance note array.

    Parameters
    ----------
    performance_note_array : structured ndarray
        needs onset_sec, duration_sec and pitch fields. velocity
        (MIDI 0-127) and track are used if present.

    Returns
    -------
    events : list
        PerformanceNoteEvent objects sorted by (start_time, midi)
    """
    names = performance_note_array.dtype.names
    n_notes = len(performance_note_array)
    if "velocity" in names:
        velocities = np.clip(performance_note_array["velocity"] / 127.0, 0.0, 1.0)
    else:
        velocities = np.ones(n_notes)
    if "track" in names:
        tracks = performance_note_array["track"]
    else:
        tracks = np.zeros(n_notes, dtype=int)

    events = []
    for idx, note in enumerate(performance_note_array):
        midi = int(note["pitch"])
        onset = float(note["onset_sec"])
        track = int(tracks[idx])
        events.append(
            PerformanceNoteEvent(
                id="{}-{}-{}-{:.3f}".format(track, idx, midi, onset),
                midi=midi,
                note_name=midi_to_note_name(midi),
                start_time=onset,
                duration=float(note["duration_sec"]),
                velocity=float(velocities[idx]),
                track=track,
            )
        )
    events.sort(key=sort_key)
    return events


def load_performance_midi(filename):
    """
    load a MIDI file as a performance stream.

    Returns
    -------
    events : list
        PerformanceNoteEvent objects
    duration : float
        end of the last sounding note in seconds
    """
    performance = pt.load_performance_midi(filename)
    events = performance_events_from_note_array(performance.note_array())
    duration = max((e.end_time for e in events), default=0.0)
    return events, duration
