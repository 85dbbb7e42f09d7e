#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to align performance streams
with notation events.
"""

from .aligner import (
    AlignmentStats,
    GreedyPitchAligner,
    align_events,
    pitch_buckets,
)
from .utils import (
    notation_only_events,
    performance_only_events,
    unified_to_alignment,
)
