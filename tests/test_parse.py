#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module includes tests for reading notation documents
and performance note arrays.
"""
import unittest
import numpy as np

from repetiteur import EXAMPLE, load_musicxml, parse_musicxml, midi_to_note_name
from repetiteur.notes import NotationNoteEvent
from repetiteur.parse import (
    DocumentNotFoundError,
    EmptyScoreError,
    HTMLDocumentError,
    MusicXMLParser,
    NotMusicXMLError,
    PackageError,
    ScoreParseError,
    UnsupportedRootError,
    duration_to_seconds,
    merge_tied_notes,
    performance_events_from_note_array,
)
from tests import (
    EXAMPLE_SCORE,
    attributes_xml,
    backup_xml,
    forward_xml,
    mxl_bytes,
    note_xml,
    partwise_xml,
    tempo_xml,
    timewise_xml,
)


def example_bytes():
    with open(EXAMPLE_SCORE, "rb") as f:
        return f.read()


def parse(document, bpm=60):
    return MusicXMLParser(fallback_bpm=bpm)(document)


class TestDocumentParsing(unittest.TestCase):
    def test_single_quarter_note(self):
        document = partwise_xml([attributes_xml(1) + note_xml("C", 4, 1), "", "", ""])
        events, duration = parse_musicxml(document, fallback_bpm=120)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].midi, 60)
        self.assertEqual(events[0].note_name, "C4")
        self.assertAlmostEqual(events[0].start_time, 0.0)
        self.assertAlmostEqual(events[0].duration, 0.5)
        self.assertAlmostEqual(duration, 0.5)

    def test_duration_to_seconds(self):
        self.assertAlmostEqual(duration_to_seconds(1, 1, 120), 0.5)
        self.assertAlmostEqual(duration_to_seconds(3, 2, 90), 1.0)

    def test_note_names(self):
        self.assertEqual(midi_to_note_name(61), "C#4")
        self.assertEqual(midi_to_note_name(21), "A0")
        self.assertEqual(midi_to_note_name(108), "C8")

    def test_parsing_is_deterministic(self):
        document = example_bytes()
        first = parse(document)
        second = parse(document)
        self.assertEqual(first.events, second.events)
        self.assertEqual(first.measure_map, second.measure_map)

    def test_events_are_sorted(self):
        measure = (
            attributes_xml(2)
            + note_xml("E", 5, 2)
            + note_xml("C", 5, 2)
            + note_xml("D", 5, 4)
            + backup_xml(8)
            + note_xml("C", 3, 4, staff=2)
            + note_xml("G", 2, 4, staff=2, chord=True)
            + note_xml("E", 3, 4, staff=2)
        )
        events = parse(partwise_xml([measure, measure])).events
        for a, b in zip(events[:-1], events[1:]):
            self.assertTrue(
                a.start_time < b.start_time
                or (a.start_time == b.start_time and a.midi <= b.midi)
            )

    def test_chord_advances_cursor_once(self):
        measure = (
            attributes_xml(1)
            + note_xml("C", 4, 2)
            + note_xml("E", 4, 2, chord=True)
            + note_xml("G", 4, 2, chord=True)
            + note_xml("D", 4, 1)
        )
        events = parse(partwise_xml([measure])).events
        self.assertEqual([e.midi for e in events], [60, 64, 67, 62])
        self.assertEqual([e.start_time for e in events], [0.0, 0.0, 0.0, 2.0])

    def test_backup_and_forward(self):
        measure = (
            attributes_xml(1)
            + note_xml("C", 5, 4)
            + backup_xml(4)
            + forward_xml(2)
            + note_xml("C", 3, 2, staff=2)
        )
        result = parse(partwise_xml([measure, note_xml("D", 5, 1)]))
        left = [e for e in result.events if e.hand == "left"]
        self.assertEqual(len(left), 1)
        self.assertEqual(left[0].staff, 2)
        self.assertAlmostEqual(left[0].start_time, 2.0)
        second_bar = [e for e in result.events if e.measure == 2]
        self.assertAlmostEqual(second_bar[0].start_time, 4.0)

    def test_rests_and_malformed_pitches_advance_cursor(self):
        measure = (
            attributes_xml(1)
            + note_xml(rest=True, duration=1)
            + note_xml("H", 4, 1)
            + note_xml("C", 4, 1)
        )
        events = parse(partwise_xml([measure])).events
        self.assertEqual(len(events), 1)
        self.assertAlmostEqual(events[0].start_time, 2.0)

    def test_grace_notes_are_skipped(self):
        measure = (
            attributes_xml(1)
            + note_xml("D", 4, grace=True)
            + note_xml("C", 4, 1, extra="<notations><ornaments><trill-mark/></ornaments></notations>")
        )
        result = parse(partwise_xml([measure]))
        self.assertEqual([e.midi for e in result.events], [60])
        self.assertAlmostEqual(result.events[0].start_time, 0.0)
        self.assertEqual(result.stats.grace_notes, 1)
        self.assertEqual(result.stats.ornaments, 1)

    def test_tempo_directives(self):
        measure = (
            attributes_xml(1)
            + tempo_xml(60)
            + note_xml("C", 4, 1)
            + '<sound tempo="120"/>'
            + note_xml("D", 4, 1)
        )
        result = parse(partwise_xml([measure]), bpm=90)
        self.assertAlmostEqual(result.tempo_bpm, 60.0)
        self.assertEqual(result.stats.tempo_changes, 2)
        self.assertAlmostEqual(result.events[0].duration, 1.0)
        self.assertAlmostEqual(result.events[1].start_time, 1.0)
        self.assertAlmostEqual(result.events[1].duration, 0.5)

    def test_fallback_tempo(self):
        result = parse(partwise_xml([attributes_xml(1) + note_xml("C", 4, 1)]), bpm=90)
        self.assertAlmostEqual(result.tempo_bpm, 90.0)
        self.assertAlmostEqual(result.events[0].duration, 60.0 / 90.0)
        with self.assertRaises(ValueError):
            MusicXMLParser(fallback_bpm=0)

    def test_time_signature_and_empty_measures(self):
        result = parse(partwise_xml([attributes_xml(1, 3, 4), ""]))
        self.assertEqual(result.time_signature, (3, 4))
        self.assertEqual(len(result.events), 0)
        self.assertAlmostEqual(result.measure_map[0].duration, 3.0)
        self.assertAlmostEqual(result.measure_map[1].start_sec, 3.0)
        self.assertAlmostEqual(result.measure_map[1].end_sec, 6.0)

    def test_voice_and_hand(self):
        measure = attributes_xml(1) + note_xml("C", 5, 1, voice="1") + backup_xml(1) + note_xml(
            "C", 3, 1, staff=2, voice="5"
        )
        events = parse(partwise_xml([measure])).events
        self.assertEqual([(e.hand, e.voice) for e in events], [("left", "5"), ("right", "1")])

    def test_event_ids_are_unique(self):
        result = parse(example_bytes())
        ids = [e.id for e in result.events]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertTrue(all(i.startswith("P1-m") for i in ids))

    def test_timewise_equals_partwise(self):
        measures = [
            attributes_xml(2) + note_xml("C", 4, 2) + note_xml("E", 4, 2, chord=True) + note_xml("G", 4, 6),
            note_xml("A", 4, 4) + backup_xml(4) + note_xml("A", 2, 4, staff=2),
        ]
        partwise = parse(partwise_xml(measures))
        timewise = parse(timewise_xml(measures))
        self.assertEqual(partwise.events, timewise.events)
        self.assertEqual(partwise.measure_map, timewise.measure_map)

    def test_byte_order_mark_and_bytes(self):
        document = partwise_xml([attributes_xml(1) + note_xml("C", 4, 1)])
        expected = parse(document).events
        self.assertEqual(parse("\ufeff" + document).events, expected)
        self.assertEqual(parse(document.encode("utf-8")).events, expected)
        self.assertEqual(parse(document.encode("utf-16")).events, expected)

    def test_namespaced_document(self):
        document = partwise_xml([attributes_xml(1) + note_xml("C", 4, 1)]).replace(
            '<score-partwise version="3.1">',
            '<score-partwise xmlns="http://www.musicxml.org/ns" version="3.1">',
        )
        self.assertEqual([e.midi for e in parse(document).events], [60])


class TestTieMerging(unittest.TestCase):
    def test_two_tied_notes(self):
        measure = attributes_xml(1) + note_xml("C", 4, 1, tie="start") + note_xml("C", 4, 2, tie="stop")
        result = parse(partwise_xml([measure]))
        self.assertEqual(len(result.events), 1)
        self.assertAlmostEqual(result.events[0].start_time, 0.0)
        self.assertAlmostEqual(result.events[0].duration, 3.0)
        self.assertEqual(result.stats.ties_merged, 1)

    def test_tie_chain_across_measures(self):
        tied_start = "<notations><tied type=\"start\"/></notations>"
        tied_stop = "<notations><tied type=\"stop\"/></notations>"
        measures = [
            attributes_xml(1) + note_xml("D", 4, 3) + note_xml("C", 4, 1, extra=tied_start),
            note_xml("C", 4, 4, tie="both"),
            note_xml("C", 4, 2, extra=tied_stop) + note_xml("C", 4, 2),
        ]
        result = parse(partwise_xml(measures))
        c_notes = [e for e in result.events if e.midi == 60]
        self.assertEqual(len(c_notes), 2)
        self.assertAlmostEqual(c_notes[0].start_time, 3.0)
        self.assertAlmostEqual(c_notes[0].duration, 7.0)
        self.assertAlmostEqual(c_notes[1].start_time, 10.0)
        self.assertEqual(result.stats.ties_merged, 2)

    def test_ties_are_kept_apart_per_staff(self):
        measure = (
            attributes_xml(1)
            + note_xml("C", 4, 1, tie="start")
            + note_xml("C", 4, 1, tie="stop")
            + backup_xml(2)
            + note_xml("C", 4, 2, staff=2)
        )
        events = parse(partwise_xml([measure])).events
        self.assertEqual(sorted((e.staff, e.duration) for e in events), [(1, 2.0), (2, 2.0)])

    def test_untied_note_extends_pending_tie(self):
        measure = attributes_xml(1) + note_xml("C", 4, 1, tie="start") + note_xml("C", 4, 1)
        result = parse(partwise_xml([measure]))
        self.assertEqual([(e.start_time, e.duration) for e in result.events], [(0.0, 2.0)])
        self.assertEqual(result.stats.ties_merged, 1)

    def test_repeated_start_keeps_tie_open(self):
        measure = (
            attributes_xml(1)
            + note_xml("C", 4, 1, tie="start")
            + note_xml("C", 4, 1, tie="start")
            + note_xml("C", 4, 2, tie="stop")
            + note_xml("C", 4, 1)
        )
        result = parse(partwise_xml([measure]))
        self.assertEqual(
            [(e.start_time, e.duration) for e in result.events], [(0.0, 4.0), (4.0, 1.0)]
        )
        self.assertEqual(result.stats.ties_merged, 2)

    def test_unclosed_tie_is_kept(self):
        measure = attributes_xml(1) + note_xml("D", 4, 1) + note_xml("C", 4, 2, tie="start")
        result = parse(partwise_xml([measure]))
        self.assertEqual([(e.midi, e.duration) for e in result.events], [(62, 1.0), (60, 2.0)])
        self.assertEqual(result.stats.ties_merged, 0)

    def test_merge_tied_notes_directly(self):
        def event(idx, start, duration):
            return NotationNoteEvent("n{}".format(idx), 60, "C4", start, duration, "right", 1, 1)

        events = [event(0, 0.0, 0.5), event(1, 0.5, 0.25), event(2, 1.0, 1.0)]
        ties = [(True, False), (False, True), (False, False)]
        merged, n_merged = merge_tied_notes(events, ties)
        self.assertEqual(n_merged, 1)
        self.assertEqual([(e.id, e.duration) for e in merged], [("n0", 0.75), ("n2", 1.0)])
        # inputs are left untouched
        self.assertEqual(events[0].duration, 0.5)


class TestMeasureMap(unittest.TestCase):
    def test_contiguous_measure_map(self):
        result = parse(example_bytes())
        measure_map = result.measure_map
        self.assertEqual([m.measure for m in measure_map], list(range(1, 9)))
        for a, b in zip(measure_map[:-1], measure_map[1:]):
            self.assertAlmostEqual(a.end_sec, b.start_sec)
        for entry in measure_map:
            self.assertGreater(entry.end_sec, entry.start_sec)

    def test_repeated_measure_numbers(self):
        content = attributes_xml(1) + note_xml("C", 4, 4)
        result = parse(partwise_xml([content, note_xml("D", 4, 4), note_xml("C", 4, 4)], numbers=["1", "2", "1"]))
        self.assertEqual([m.playthrough for m in result.measure_map], [0, 0, 1])
        self.assertEqual([m.measure for m in result.measure_map], [1, 2, 3])
        self.assertEqual(result.stats.unique_measures, 2)

    def test_first_part_defines_measure_map(self):
        measures = {
            "P1": [attributes_xml(1) + note_xml("C", 5, 4)],
            "P2": [attributes_xml(1) + note_xml("C", 3, 8)],
        }
        result = parse(partwise_xml(measures))
        self.assertEqual(len(result.measure_map), 1)
        self.assertAlmostEqual(result.measure_map[0].end_sec, 4.0)
        self.assertEqual(len(result.events), 2)


class TestExampleScore(unittest.TestCase):
    def test_example_score(self):
        result = load_musicxml(EXAMPLE, extended=True)
        stats = result.stats
        self.assertEqual(stats.notes, 38)
        self.assertEqual(stats.grace_notes, 1)
        self.assertEqual(stats.ties_merged, 1)
        self.assertEqual(stats.ornaments, 1)
        self.assertEqual(stats.unique_measures, 8)
        self.assertEqual(stats.tempo_changes, 1)
        self.assertAlmostEqual(result.tempo_bpm, 120.0)
        self.assertEqual(result.time_signature, (3, 4))
        self.assertAlmostEqual(result.duration, 12.0)
        self.assertEqual(len([e for e in result.events if e.hand == "left"]), 12)
        tied = [e for e in result.events if e.midi == 67 and abs(e.start_time - 5.5) < 1e-6]
        self.assertEqual(len(tied), 1)
        self.assertAlmostEqual(tied[0].duration, 1.0)
        self.assertIn("F#5", [e.note_name for e in result.events])

    def test_load_returns_events_and_duration(self):
        events, duration = load_musicxml(EXAMPLE)
        self.assertEqual(len(events), 38)
        self.assertAlmostEqual(duration, 12.0)


class TestDocumentErrors(unittest.TestCase):
    def test_error_hierarchy(self):
        for error in [
            DocumentNotFoundError,
            HTMLDocumentError,
            NotMusicXMLError,
            UnsupportedRootError,
            EmptyScoreError,
            PackageError,
        ]:
            self.assertTrue(issubclass(error, ScoreParseError))
            self.assertTrue(issubclass(error, ValueError))
        self.assertTrue(issubclass(DocumentNotFoundError, FileNotFoundError))

    def test_missing_file(self):
        with self.assertRaises(DocumentNotFoundError):
            load_musicxml("/nonexistent/score.musicxml")

    def test_html_document(self):
        with self.assertRaises(HTMLDocumentError):
            parse("<!DOCTYPE html><html><body>404</body></html>")
        with self.assertRaises(HTMLDocumentError):
            parse("<html><head></head></html>")

    def test_not_xml(self):
        with self.assertRaises(NotMusicXMLError):
            parse("MThd this is not a score")
        with self.assertRaises(NotMusicXMLError):
            parse('<?xml version="1.0"?><score-partwise><part id="P1">')

    def test_unsupported_root(self):
        with self.assertRaises(UnsupportedRootError):
            parse('<?xml version="1.0"?><opus><title>x</title></opus>')

    def test_empty_scores(self):
        with self.assertRaises(EmptyScoreError):
            parse('<?xml version="1.0"?><score-partwise><part-list/></score-partwise>')
        with self.assertRaises(EmptyScoreError):
            parse('<?xml version="1.0"?><score-partwise><part id="P1"/></score-partwise>')
        with self.assertRaises(EmptyScoreError):
            parse('<?xml version="1.0"?><score-timewise><part-list/></score-timewise>')


class TestPackages(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.document = partwise_xml([attributes_xml(1) + note_xml("C", 4, 1)])
        cls.other = partwise_xml([attributes_xml(1) + note_xml("G", 4, 1) + note_xml("A", 4, 1)])

    def test_manifest_is_followed(self):
        data = mxl_bytes({"score.xml": self.document, "bigger.musicxml": self.other}, "score.xml")
        self.assertEqual([e.midi for e in parse(data).events], [60])

    def test_largest_member_without_manifest(self):
        data = mxl_bytes({"score.xml": self.document, "bigger.musicxml": self.other})
        self.assertEqual([e.midi for e in parse(data).events], [67, 69])

    def test_manifest_pointing_to_missing_member(self):
        data = mxl_bytes({"score.xml": self.document}, "missing.xml")
        with self.assertRaises(PackageError):
            parse(data)

    def test_package_without_score(self):
        data = mxl_bytes({"readme.txt": "nothing here"})
        with self.assertRaises(PackageError):
            parse(data)

    def test_corrupt_package(self):
        with self.assertRaises(PackageError):
            parse(b"PK\x03\x04 definitely not a zip archive")


class TestPerformanceNoteArray(unittest.TestCase):
    def test_events_from_note_array(self):
        dtype = [("onset_sec", "f4"), ("duration_sec", "f4"), ("pitch", "i4"), ("velocity", "i4"), ("track", "i4")]
        na = np.array([(1.0, 0.5, 64, 127, 0), (0.5, 0.25, 60, 64, 1), (0.5, 0.25, 55, 200, 0)], dtype=dtype)
        events = performance_events_from_note_array(na)
        self.assertEqual([e.midi for e in events], [55, 60, 64])
        self.assertEqual(events[1].id, "1-1-60-0.500")
        self.assertEqual(events[1].note_name, "C4")
        self.assertAlmostEqual(events[2].velocity, 1.0)
        self.assertAlmostEqual(events[0].velocity, 1.0)
        self.assertAlmostEqual(events[1].velocity, 64 / 127.0)

    def test_minimal_fields(self):
        dtype = [("onset_sec", "f8"), ("duration_sec", "f8"), ("pitch", "i4")]
        events = performance_events_from_note_array(np.array([(0.0, 1.0, 60)], dtype=dtype))
        self.assertEqual(events[0].track, 0)
        self.assertAlmostEqual(events[0].velocity, 1.0)


if __name__ == "__main__":
    unittest.main()
