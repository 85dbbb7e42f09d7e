#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the per-bar feature extraction.
"""
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from ..notes import note_array

RHYTHM_BINS = 16
CONTOUR_CAP = 32
HAND_VIEWS = ("combined", "right", "left")
# onsets this close before a bar line count for the next bar
BAR_TOLERANCE = 1e-3


@dataclass(frozen=True)
class BarFeature:
    measure: int
    start_sec: float
    end_sec: float
    rhythm: np.ndarray = field(compare=False)  # onset bitmap
    pitch_classes: Tuple[int, ...]
    contour: Tuple[int, ...]
    note_count: int
    hand: str


def extract_bar_features(
    events,
    measure_map,
    hand="combined",
    rhythm_bins=RHYTHM_BINS,
    contour_cap=CONTOUR_CAP,
):
    """
    compute one BarFeature per measure map entry.

    Parameters
    ----------
    events : list
        notation (or unified) note events
    measure_map : list
        MeasureMapEntry objects
    hand : str
        "combined", "right" or "left"

    Returns
    -------
    features : list
        BarFeature objects in measure map order
    """
    if hand not in HAND_VIEWS:
        raise ValueError("unknown hand view: {}".format(hand))
    notes = note_array(events)
    if hand != "combined":
        notes = notes[notes["hand"] == hand]
    notes = notes[np.lexsort((notes["pitch"], notes["onset_sec"]))]
    onsets = notes["onset_sec"]

    features = []
    for entry in measure_map:
        bar_duration = max(entry.end_sec - entry.start_sec, 0.01)
        mask = np.all(
            (
                onsets >= entry.start_sec - BAR_TOLERANCE,
                onsets < entry.end_sec - BAR_TOLERANCE,
            ),
            axis=0,
        )
        bar = notes[mask]

        relative = (bar["onset_sec"] - entry.start_sec) / bar_duration
        bins = np.clip(np.floor(relative * rhythm_bins).astype(int), 0, rhythm_bins - 1)
        rhythm = np.zeros(rhythm_bins, dtype=np.float64)
        rhythm[bins] = 1.0

        features.append(
            BarFeature(
                measure=entry.measure,
                start_sec=entry.start_sec,
                end_sec=entry.end_sec,
                rhythm=rhythm,
                pitch_classes=tuple(sorted(set(int(p) % 12 for p in bar["pitch"]))),
                contour=tuple(int(p) for p in bar["pitch"][:contour_cap]),
                note_count=len(bar),
                hand=hand,
            )
        )
    return features
