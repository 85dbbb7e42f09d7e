#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains functionality to export unified note
streams and structure analyses.
"""

import csv
import json
from dataclasses import asdict, is_dataclass

UNIFIED_CSV_HEADER = [
    "id",
    "midi",
    "note_name",
    "start_time",
    "duration",
    "hand",
    "staff",
    "voice",
    "measure",
    "velocity",
    "performance_id",
    "notation_id",
    "confidence",
]


def unified_rows(unified_events):
    """
    one list of values per event, in UNIFIED_CSV_HEADER order
    """
    return [
        [
            u.id,
            u.midi,
            u.note_name,
            "{:.4f}".format(u.start_time),
            "{:.4f}".format(u.duration),
            u.hand,
            "" if u.staff is None else u.staff,
            "" if u.voice is None else u.voice,
            "" if u.measure is None else u.measure,
            "" if u.velocity is None else "{:.3f}".format(u.velocity),
            "" if u.source.performance_id is None else u.source.performance_id,
            "" if u.source.notation_id is None else u.source.notation_id,
            "{:.4f}".format(u.source.confidence),
        ]
        for u in unified_events
    ]


def save_unified_csv(unified_events, out="unified_notes.csv"):
    """
    save a unified note stream as csv

    Parameters
    ----------
    unified_events : list
        UnifiedNoteEvent objects
    out : str
        path of the csv file
    """
    with open(out, mode="w", newline="") as file:
        writer = csv.writer(file)
        writer.writerow(UNIFIED_CSV_HEADER)
        writer.writerows(unified_rows(unified_events))


def _jsonable(value):
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def analysis_to_dict(analysis):
    """
    convert a StructureAnalysis into plain dicts and lists
    """
    if not is_dataclass(analysis):
        raise TypeError("expected a StructureAnalysis, got {}".format(type(analysis)))
    return _jsonable(asdict(analysis))


def save_analysis_json(analysis, out="analysis.json"):
    with open(out, mode="w") as file:
        json.dump(analysis_to_dict(analysis), file, indent=2)
