#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains helpers around unified note streams:
single-source streams and conversion to alignment dictionaries.
"""
from ..notes import EventSource, UnifiedNoteEvent, hand_from_pitch, sort_key

PERFORMANCE_ONLY_CONFIDENCE = 0.25
NOTATION_ONLY_CONFIDENCE = 0.3


def performance_only_events(performance_events):
    """
    unified stream from a performance alone, hands guessed from pitch
    """
    unified = [
        UnifiedNoteEvent(
            id="m-{}".format(p_note.id),
            midi=p_note.midi,
            note_name=p_note.note_name,
            start_time=p_note.start_time,
            duration=p_note.duration,
            hand=hand_from_pitch(p_note.midi),
            velocity=p_note.velocity,
            source=EventSource(p_note.id, None, PERFORMANCE_ONLY_CONFIDENCE),
        )
        for p_note in performance_events
    ]
    unified.sort(key=sort_key)
    return unified


def notation_only_events(notation_events):
    """
    unified stream from notation alone, with notation timing
    """
    unified = [
        UnifiedNoteEvent(
            id="x-{}".format(s_note.id),
            midi=s_note.midi,
            note_name=s_note.note_name,
            start_time=s_note.start_time,
            duration=s_note.duration,
            hand=s_note.hand,
            staff=s_note.staff,
            voice=s_note.voice,
            measure=s_note.measure,
            source=EventSource(None, s_note.id, NOTATION_ONLY_CONFIDENCE),
        )
        for s_note in notation_events
    ]
    unified.sort(key=sort_key)
    return unified


def unified_to_alignment(unified_events, min_confidence=0.0):
    """
    convert a unified stream into a list of alignment dictionaries
    (labels match, insertion, deletion).

    Pairs below min_confidence are split into an insertion and a
    deletion.

    Parameters
    ----------
    unified_events : list
        UnifiedNoteEvent objects
    min_confidence : float

    Returns
    -------
    alignment : list
        dicts with "label" and "score_id" / "performance_id" keys
    """
    alignment = []
    for event in unified_events:
        source = event.source
        if source.performance_id is not None and source.notation_id is not None:
            if source.confidence >= min_confidence:
                alignment.append(
                    {
                        "label": "match",
                        "score_id": source.notation_id,
                        "performance_id": source.performance_id,
                    }
                )
                continue
            alignment.append({"label": "insertion", "performance_id": source.performance_id})
            alignment.append({"label": "deletion", "score_id": source.notation_id})
        elif source.performance_id is not None:
            alignment.append({"label": "insertion", "performance_id": source.performance_id})
        elif source.notation_id is not None:
            alignment.append({"label": "deletion", "score_id": source.notation_id})
    return alignment
