#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to find sections and repeated
patterns in a piece and to organize them for practice.
"""

from .analyzer import (
    ALGORITHM_VERSION,
    Lesson,
    PatternInsight,
    Segment,
    SimilarityMatch,
    StructureAnalysis,
    StructureAnalyzer,
    analyze_piece,
)
from .features import BarFeature, extract_bar_features
from .metrics import (
    bar_similarity_matrix,
    contour_similarity,
    cosine_similarity,
    jaccard_similarity,
    window_similarity,
)
from .sections import SectionBoundary, detect_sections
from .timeline import bar_at_time, bars_to_seconds, piece_hash
