#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to read notation documents
and performance streams.
"""

from .errors import (
    ScoreParseError,
    DocumentNotFoundError,
    HTMLDocumentError,
    NotMusicXMLError,
    UnsupportedRootError,
    EmptyScoreError,
    PackageError,
)
from .musicxml import (
    DEFAULT_BPM,
    MusicXMLParser,
    ParseResult,
    ParseStats,
    duration_to_seconds,
    load_musicxml,
    merge_tied_notes,
    parse_musicxml,
)
from .container import read_document_text, unwrap_package
from .performance import load_performance_midi, performance_events_from_note_array
