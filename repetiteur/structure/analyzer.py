#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the structure analyzer: it segments a piece,
finds repeated and near-repeated sections and turns them into
practice segments, lessons and pattern insights.
"""
import hashlib
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .features import CONTOUR_CAP, HAND_VIEWS, RHYTHM_BINS, extract_bar_features
from .metrics import window_similarity
from .sections import (
    DEFAULT_SECTION_BARS,
    DENSITY_FLOOR,
    DENSITY_RATIO,
    MAX_SECTION_BARS,
    MIN_SECTION_BARS,
    SectionBoundary,
    detect_sections,
)

# bump on any change to detection or scoring constants
ALGORITHM_VERSION = "1.0"
SIMILARITY_THRESHOLD = 0.75
EXACT_THRESHOLD = 0.95
LESSON_SIZE = 4


@dataclass(frozen=True)
class SimilarityMatch:
    section_a: SectionBoundary
    section_b: SectionBoundary
    score: float
    hand: str

    @property
    def key(self):
        return (self.section_a.bar_range, self.section_b.bar_range)


@dataclass(frozen=True)
class Segment:
    id: str
    title: str
    start_bar: int
    end_bar: int
    start_sec: float
    end_sec: float
    repeat_count: int
    occurrences: Tuple[str, ...]
    similarity_score: Optional[float] = None


@dataclass(frozen=True)
class Lesson:
    id: str
    title: str
    segments: Tuple[Segment, ...]
    duration_sec: float
    start_sec: float
    end_sec: float


@dataclass(frozen=True)
class PatternInsight:
    id: int
    text: str
    bar_range: str
    type: str  # exact, near, left-hand or transposed
    loop_start: int
    loop_end: int
    occurrences: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class StructureAnalysis:
    segments: List[Segment]
    lessons: List[Lesson]
    insights: List[PatternInsight]
    algorithm_version: str


class StructureAnalyzer(object):
    """
    Detect practice sections and their repetitions.

    Bars are described per hand view (combined, right, left) by an
    onset bitmap, a pitch-class set and a pitch contour. Sections come
    from note density changes, capped at max_section_bars. All section
    pairs are compared per hand view; the best score per pair is kept.

    Parameters
    ----------
    min_section_bars : int
    max_section_bars : int
    default_section_bars : int
        chunk length used to split sections longer than the maximum.
    similarity_threshold : float
        minimal score of a match.
    exact_threshold : float
        scores above are reported as exact repeats.
    lesson_size : int
        segments per lesson.
    """

    def __init__(
        self,
        min_section_bars=MIN_SECTION_BARS,
        max_section_bars=MAX_SECTION_BARS,
        default_section_bars=DEFAULT_SECTION_BARS,
        similarity_threshold=SIMILARITY_THRESHOLD,
        exact_threshold=EXACT_THRESHOLD,
        density_floor=DENSITY_FLOOR,
        density_ratio=DENSITY_RATIO,
        rhythm_bins=RHYTHM_BINS,
        contour_cap=CONTOUR_CAP,
        lesson_size=LESSON_SIZE,
        verbose=False,
    ):
        if min_section_bars < 1:
            raise ValueError("min_section_bars needs to be at least 1")
        if max_section_bars < min_section_bars:
            raise ValueError("max_section_bars needs to be >= min_section_bars")
        if lesson_size < 1:
            raise ValueError("lesson_size needs to be at least 1")
        self.min_section_bars = min_section_bars
        self.max_section_bars = max_section_bars
        self.default_section_bars = default_section_bars
        self.similarity_threshold = similarity_threshold
        self.exact_threshold = exact_threshold
        self.density_floor = density_floor
        self.density_ratio = density_ratio
        self.rhythm_bins = rhythm_bins
        self.contour_cap = contour_cap
        self.lesson_size = lesson_size
        self.verbose = verbose

    @property
    def parameters(self):
        return (
            ("min_section_bars", self.min_section_bars),
            ("max_section_bars", self.max_section_bars),
            ("default_section_bars", self.default_section_bars),
            ("similarity_threshold", self.similarity_threshold),
            ("exact_threshold", self.exact_threshold),
            ("density_floor", self.density_floor),
            ("density_ratio", self.density_ratio),
            ("rhythm_bins", self.rhythm_bins),
            ("contour_cap", self.contour_cap),
            ("lesson_size", self.lesson_size),
        )

    @property
    def algorithm_version(self):
        """
        ALGORITHM_VERSION, suffixed with a digest of the constants
        when they differ from the defaults
        """
        if self.parameters == StructureAnalyzer().parameters:
            return ALGORITHM_VERSION
        digest = hashlib.sha1(repr(self.parameters).encode("utf-8")).hexdigest()
        return "{}+{}".format(ALGORITHM_VERSION, digest[:8])

    def find_similar_sections(self, sections, features, hand):
        feature_by_bar = {f.measure: f for f in features}
        matches = []
        for i, section_a in enumerate(sections):
            for section_b in sections[i + 1:]:
                window_a = [
                    feature_by_bar[bar]
                    for bar in range(section_a.start_bar, section_a.end_bar + 1)
                    if bar in feature_by_bar
                ]
                window_b = [
                    feature_by_bar[bar]
                    for bar in range(section_b.start_bar, section_b.end_bar + 1)
                    if bar in feature_by_bar
                ]
                n_bars = min(len(window_a), len(window_b))
                if n_bars < self.min_section_bars:
                    continue
                score = window_similarity(window_a[:n_bars], window_b[:n_bars])
                if score >= self.similarity_threshold:
                    matches.append(SimilarityMatch(section_a, section_b, score, hand))
        return matches

    def generate_segments(self, sections, matches):
        segments = []
        for idx, section in enumerate(sections):
            occurrences = [section.bar_range]
            best_score = 0.0
            for match in matches:
                if match.section_a == section:
                    other = match.section_b
                elif match.section_b == section:
                    other = match.section_a
                else:
                    continue
                if other.bar_range not in occurrences:
                    occurrences.append(other.bar_range)
                best_score = max(best_score, match.score)

            segments.append(
                Segment(
                    id="seg-{}".format(idx + 1),
                    title="Section {} (Bars {})".format(idx + 1, section.bar_range),
                    start_bar=section.start_bar,
                    end_bar=section.end_bar,
                    start_sec=section.start_sec,
                    end_sec=section.end_sec,
                    repeat_count=len(occurrences),
                    occurrences=tuple(occurrences),
                    similarity_score=best_score if best_score > 0 else None,
                )
            )
        return segments

    def generate_lessons(self, segments):
        if len(segments) == 0:
            return []
        if len(segments) <= self.lesson_size:
            group_size = len(segments)
        else:
            group_size = min(self.lesson_size, int(math.ceil(len(segments) / 3)))

        lessons = []
        for lesson_no, i in enumerate(range(0, len(segments), group_size), start=1):
            group = tuple(segments[i:i + group_size])
            start_sec = group[0].start_sec
            end_sec = group[-1].end_sec
            lessons.append(
                Lesson(
                    id="lesson-{}".format(lesson_no),
                    title="Part {}: Bars {}-{}".format(
                        lesson_no, group[0].start_bar, group[-1].end_bar
                    ),
                    segments=group,
                    duration_sec=end_sec - start_sec,
                    start_sec=start_sec,
                    end_sec=end_sec,
                )
            )
        return lessons

    def generate_insights(self, segments, matches):
        insights = []
        for match in matches:
            range_a = match.section_a.bar_range
            range_b = match.section_b.bar_range
            if match.score > self.exact_threshold:
                insight_type = "exact"
                text = "Bars {} repeat exactly at bars {}: master it once, play it twice".format(
                    range_a, range_b
                )
            else:
                insight_type = "near"
                text = "Bars {} are very similar to bars {}: same patterns, minor variations".format(
                    range_a, range_b
                )
            insights.append(
                PatternInsight(
                    id=len(insights) + 1,
                    text=text,
                    bar_range="Bars {}".format(range_a),
                    type=insight_type,
                    loop_start=match.section_a.start_bar,
                    loop_end=match.section_a.end_bar,
                    occurrences=(range_b,),
                )
            )

        # summaries are reported as "near" so every exact repeat is listed once
        for segment in segments:
            if segment.repeat_count > 1:
                insights.append(
                    PatternInsight(
                        id=len(insights) + 1,
                        text="This section appears {} times, practicing it covers {}".format(
                            segment.repeat_count, ", ".join(segment.occurrences)
                        ),
                        bar_range="Bars {}-{}".format(segment.start_bar, segment.end_bar),
                        type="near",
                        loop_start=segment.start_bar,
                        loop_end=segment.end_bar,
                        occurrences=segment.occurrences[1:],
                    )
                )
        return insights

    def __call__(self, events, measure_map):
        """
        Parameters
        ----------
        events : list
            NotationNoteEvent (or UnifiedNoteEvent) objects
        measure_map : list
            MeasureMapEntry objects

        Returns
        -------
        analysis : StructureAnalysis
        """
        version = self.algorithm_version
        if len(events) == 0 or len(measure_map) == 0:
            return StructureAnalysis([], [], [], version)

        t1 = time.time()
        features = {
            hand: extract_bar_features(
                events, measure_map, hand, self.rhythm_bins, self.contour_cap
            )
            for hand in HAND_VIEWS
        }
        sections = detect_sections(
            features["combined"],
            self.min_section_bars,
            self.max_section_bars,
            self.default_section_bars,
            self.density_floor,
            self.density_ratio,
        )
        t2 = time.time()

        best_matches = dict()
        for hand in HAND_VIEWS:
            for match in self.find_similar_sections(sections, features[hand], hand):
                current = best_matches.get(match.key)
                if current is None or match.score > current.score:
                    best_matches[match.key] = match
        matches = list(best_matches.values())
        t3 = time.time()

        segments = self.generate_segments(sections, matches)
        lessons = self.generate_lessons(segments)
        insights = self.generate_insights(segments, matches)
        if self.verbose:
            print(format(t2 - t1, ".3f"), "sec : Bar features and sections")
            print(format(t3 - t2, ".3f"), "sec : Section similarity")
            print(len(sections), "sections,", len(matches), "matches")
        return StructureAnalysis(segments, lessons, insights, version)


def analyze_piece(events, measure_map, **kwargs):
    return StructureAnalyzer(**kwargs)(events, measure_map)
