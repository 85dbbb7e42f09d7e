#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
The top level of the package contains functions to
read notation documents, align performances to them and
analyze the practice structure of a piece.
"""
import os

EXAMPLE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "minuet_excerpt.musicxml")

from .notes import (
    NotationNoteEvent,
    PerformanceNoteEvent,
    UnifiedNoteEvent,
    EventSource,
    MeasureMapEntry,
    filter_events_by_hand,
    midi_to_note_name,
    note_array,
)
from .parse import (
    MusicXMLParser,
    ParseResult,
    ScoreParseError,
    load_musicxml,
    load_performance_midi,
    parse_musicxml,
)
from .align import (
    GreedyPitchAligner,
    align_events,
    notation_only_events,
    performance_only_events,
    unified_to_alignment,
)
from .structure import (
    ALGORITHM_VERSION,
    StructureAnalyzer,
    analyze_piece,
    bar_at_time,
    bars_to_seconds,
    piece_hash,
)
from .evaluate import (
    fscore_alignments,
    print_fscore_alignments,
    evaluate_asynchrony,
    plot_alignment,
    plot_bar_similarity,
    save_unified_csv,
    analysis_to_dict,
    validate_score,
    align_files,
    analyze_file,
)

__all__ = [
    "EXAMPLE",
    "ALGORITHM_VERSION",
    "NotationNoteEvent",
    "PerformanceNoteEvent",
    "UnifiedNoteEvent",
    "EventSource",
    "MeasureMapEntry",
    "filter_events_by_hand",
    "midi_to_note_name",
    "note_array",
    "MusicXMLParser",
    "ParseResult",
    "ScoreParseError",
    "load_musicxml",
    "load_performance_midi",
    "parse_musicxml",
    "GreedyPitchAligner",
    "align_events",
    "notation_only_events",
    "performance_only_events",
    "unified_to_alignment",
    "StructureAnalyzer",
    "analyze_piece",
    "bar_at_time",
    "bars_to_seconds",
    "piece_hash",
    "fscore_alignments",
    "print_fscore_alignments",
    "evaluate_asynchrony",
    "plot_alignment",
    "plot_bar_similarity",
    "save_unified_csv",
    "analysis_to_dict",
    "validate_score",
    "align_files",
    "analyze_file",
]
