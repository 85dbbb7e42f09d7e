#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains helpers to move between bars and seconds
on a measure map, and the content hash of a piece.
"""
import hashlib
from typing import Optional, Tuple

PIECE_HASH_NOTES = 200


def bars_to_seconds(measure_map, start_bar, end_bar) -> Optional[Tuple[float, float]]:
    """
    time span from the start of start_bar to the end of end_bar
    (first playthrough of each), None if a bar is not in the map
    """
    start_entry = next((m for m in measure_map if m.measure == start_bar), None)
    end_entry = next((m for m in measure_map if m.measure == end_bar), None)
    if start_entry is None or end_entry is None:
        return None
    return start_entry.start_sec, end_entry.end_sec


def bar_at_time(measure_map, t) -> Optional[int]:
    """
    measure number sounding at time t (seconds). Times before the
    first bar give the first measure, times after the last bar the
    last one.
    """
    if len(measure_map) == 0:
        return None
    if t < measure_map[0].start_sec:
        return measure_map[0].measure
    for entry in measure_map:
        if entry.start_sec <= t < entry.end_sec:
            return entry.measure
    return measure_map[-1].measure


def piece_hash(events) -> str:
    """
    stable content hash over the first 200 (midi, onset in ms) pairs
    of a sorted event list
    """
    digest = hashlib.sha1()
    for event in list(events)[:PIECE_HASH_NOTES]:
        digest.update(
            "{}:{};".format(event.midi, int(round(event.start_time * 1000))).encode("ascii")
        )
    return "piece_{}".format(digest.hexdigest()[:16])
