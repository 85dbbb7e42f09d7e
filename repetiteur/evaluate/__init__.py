#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to visualize, export, and
evaluate aligned and analyzed music data.
"""

from .io import analysis_to_dict, save_analysis_json, save_unified_csv
from .eval import (
    fscore_alignments,
    print_fscore_alignments,
    evaluate_asynchrony,
    matched_onsets,
)
from .plot import plot_alignment, plot_bar_similarity
from .simple import align_files, analyze_file, validate_score
