#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the section boundary detection: note density
changes first, then regular chunks wherever a section would grow
beyond the maximum length.
"""
import math
from dataclasses import dataclass

MIN_SECTION_BARS = 2
MAX_SECTION_BARS = 16
DEFAULT_SECTION_BARS = 8
DENSITY_FLOOR = 3
DENSITY_RATIO = 0.5


@dataclass(frozen=True)
class SectionBoundary:
    start_bar: int
    end_bar: int
    start_sec: float
    end_sec: float

    @property
    def bar_range(self) -> str:
        return "{}-{}".format(self.start_bar, self.end_bar)

    @property
    def n_bars(self) -> int:
        return self.end_bar - self.start_bar + 1


def chunk_size(total_bars, min_bars, max_bars, default_bars):
    if total_bars <= max_bars:
        return max(min_bars, int(math.ceil(total_bars / 2)))
    return min(default_bars, max_bars)


def density_boundaries(
    note_counts,
    min_bars=MIN_SECTION_BARS,
    density_floor=DENSITY_FLOOR,
    density_ratio=DENSITY_RATIO,
):
    """
    bar indices where the note count jumps by more than
    max(floor, ratio * previous count), at least min_bars apart
    """
    boundaries = [0]
    for i in range(1, len(note_counts)):
        previous = note_counts[i - 1]
        change = abs(note_counts[i] - previous)
        if change > max(density_floor, previous * density_ratio):
            if i - boundaries[-1] >= min_bars:
                boundaries.append(i)
    return boundaries


def fill_boundaries(boundaries, total_bars, max_bars, size):
    """
    insert boundaries every `size` bars inside gaps longer than max_bars
    """
    filled = [boundaries[0]]
    for boundary in list(boundaries[1:]) + [total_bars]:
        position = filled[-1]
        while boundary - position > max_bars:
            position += size
            if position < boundary:
                filled.append(position)
        if boundary < total_bars:
            filled.append(boundary)
    return sorted(set(filled))


def detect_sections(
    features,
    min_section_bars=MIN_SECTION_BARS,
    max_section_bars=MAX_SECTION_BARS,
    default_section_bars=DEFAULT_SECTION_BARS,
    density_floor=DENSITY_FLOOR,
    density_ratio=DENSITY_RATIO,
):
    """
    split the bars of a piece into contiguous sections.

    Parameters
    ----------
    features : list
        combined-view BarFeature objects in measure map order

    Returns
    -------
    sections : list
        SectionBoundary objects partitioning all bars
    """
    total_bars = len(features)
    if total_bars == 0:
        return []

    size = chunk_size(total_bars, min_section_bars, max_section_bars, default_section_bars)
    boundaries = density_boundaries(
        [f.note_count for f in features], min_section_bars, density_floor, density_ratio
    )
    boundaries = fill_boundaries(boundaries, total_bars, max_section_bars, size)

    sections = []
    for i, start_idx in enumerate(boundaries):
        end_idx = boundaries[i + 1] - 1 if i + 1 < len(boundaries) else total_bars - 1
        sections.append(
            SectionBoundary(
                start_bar=features[start_idx].measure,
                end_bar=features[end_idx].measure,
                start_sec=features[start_idx].start_sec,
                end_sec=features[end_idx].end_sec,
            )
        )
    return sections
