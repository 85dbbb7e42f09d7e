#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains condensed,
single-command methods to read, align and analyze music files
and save the result as csv files.
"""

import pandas as pd

from ..align import GreedyPitchAligner
from ..parse import DEFAULT_BPM, load_musicxml, load_performance_midi
from ..structure import StructureAnalyzer
from .io import UNIFIED_CSV_HEADER, unified_rows


def validate_score(score_file, fallback_bpm=DEFAULT_BPM, print_report=True):
    """
    parse a MusicXML / MXL file and print what was read

    Returns
    -------
    result : ParseResult
    """
    result = load_musicxml(score_file, fallback_bpm, extended=True)
    if print_report:
        stats = result.stats
        print("------------------")
        print("Score: ", score_file)
        print("Notes: ", stats.notes)
        print("Grace notes skipped: ", stats.grace_notes)
        print("Ties merged: ", stats.ties_merged)
        print("Ornaments: ", stats.ornaments)
        print("Measures: ", stats.unique_measures)
        print("Tempo changes: ", stats.tempo_changes)
        print("Tempo (bpm): ", format(result.tempo_bpm, ".1f"))
        print("Time signature: ", "{}/{}".format(*result.time_signature))
        print("Duration (sec): ", format(result.duration, ".3f"))
        print("------------------")
    return result


def align_files(
    score_file,  # MusicXML or MXL file providing notation semantics
    performance_file,  # a recorded or sequenced midi file providing timing
    output_file="aligned_notes.csv",  # a path to a csv file where we store the unified notes
    fallback_bpm=DEFAULT_BPM,
    **aligner_kwargs
):
    """
    parse, load, align and export in one call

    Returns
    -------
    unified : list
        UnifiedNoteEvent objects
    stats : AlignmentStats
    """
    notation_events, _ = load_musicxml(score_file, fallback_bpm)
    performance_events, _ = load_performance_midi(performance_file)

    aligner = GreedyPitchAligner(**aligner_kwargs)
    unified, stats = aligner(performance_events, notation_events)

    if output_file is not None:
        output_df = pd.DataFrame(unified_rows(unified), columns=UNIFIED_CSV_HEADER)
        output_df.to_csv(output_file, index=False)

    return unified, stats


def analyze_file(score_file, fallback_bpm=DEFAULT_BPM, **analyzer_kwargs):
    """
    parse a score file and run the structure analysis on it

    Returns
    -------
    analysis : StructureAnalysis
    """
    result = load_musicxml(score_file, fallback_bpm, extended=True)
    analyzer = StructureAnalyzer(**analyzer_kwargs)
    return analyzer(result.events, result.measure_map)
