#!/usr/bin/env python
# -*- coding: utf-8 -*-
# pylint: skip-file
"""
This module contains tests.
"""

import io
import os
import zipfile

BASE_PATH = os.path.dirname(os.path.realpath(__file__))
REPO_PATH = os.path.dirname(BASE_PATH)
EXAMPLE_SCORE = os.path.join(REPO_PATH, "repetiteur", "assets", "minuet_excerpt.musicxml")

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
PACKAGE_MANIFEST = (
    XML_HEADER
    + "<container><rootfiles>"
    + '<rootfile full-path="{}" media-type="application/vnd.recordare.musicxml+xml"/>'
    + "</rootfiles></container>"
)


def note_xml(
    step="C",
    octave=4,
    duration=1,
    staff=1,
    alter=None,
    chord=False,
    tie=None,
    voice="1",
    rest=False,
    grace=False,
    extra="",
):
    """
    a single <note> element, tie is None, "start", "stop" or "both"
    """
    parts = ["<note>"]
    if grace:
        parts.append("<grace/>")
    if chord:
        parts.append("<chord/>")
    if rest:
        parts.append("<rest/>")
    else:
        parts.append("<pitch><step>{}</step>".format(step))
        if alter is not None:
            parts.append("<alter>{}</alter>".format(alter))
        parts.append("<octave>{}</octave></pitch>".format(octave))
    if not grace:
        parts.append("<duration>{}</duration>".format(duration))
    if tie in ("start", "both"):
        parts.append('<tie type="start"/>')
    if tie in ("stop", "both"):
        parts.append('<tie type="stop"/>')
    if voice is not None:
        parts.append("<voice>{}</voice>".format(voice))
    parts.append("<staff>{}</staff>".format(staff))
    parts.append(extra)
    parts.append("</note>")
    return "".join(parts)


def attributes_xml(divisions=1, beats=4, beat_type=4):
    return (
        "<attributes><divisions>{}</divisions>"
        "<time><beats>{}</beats><beat-type>{}</beat-type></time>"
        "<staves>2</staves></attributes>"
    ).format(divisions, beats, beat_type)


def tempo_xml(bpm):
    return '<direction><sound tempo="{}"/></direction>'.format(bpm)


def backup_xml(duration):
    return "<backup><duration>{}</duration></backup>".format(duration)


def forward_xml(duration):
    return "<forward><duration>{}</duration></forward>".format(duration)


def partwise_xml(measures, part_ids=("P1",), numbers=None):
    """
    score-partwise document, measures is a list of measure contents
    (or a dict part id -> list for several parts)
    """
    if not isinstance(measures, dict):
        measures = {part_ids[0]: measures}
    body = []
    for part_id, contents in measures.items():
        body.append('<part id="{}">'.format(part_id))
        for i, content in enumerate(contents):
            number = numbers[i] if numbers is not None else i + 1
            body.append('<measure number="{}">{}</measure>'.format(number, content))
        body.append("</part>")
    part_list = "".join(
        '<score-part id="{0}"><part-name>{0}</part-name></score-part>'.format(p)
        for p in measures
    )
    return (
        XML_HEADER
        + '<score-partwise version="3.1"><part-list>{}</part-list>{}</score-partwise>'.format(
            part_list, "".join(body)
        )
    )


def timewise_xml(measures, part_id="P1"):
    body = "".join(
        '<measure number="{}"><part id="{}">{}</part></measure>'.format(i + 1, part_id, content)
        for i, content in enumerate(measures)
    )
    return (
        XML_HEADER
        + '<score-timewise version="3.1"><part-list><score-part id="{0}">'
        "<part-name>{0}</part-name></score-part></part-list>{1}</score-timewise>".format(
            part_id, body
        )
    )


def mxl_bytes(members, manifest_target=None):
    """
    zip package from a dict name -> text, with a manifest
    pointing at manifest_target if given
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        if manifest_target is not None:
            archive.writestr("META-INF/container.xml", PACKAGE_MANIFEST.format(manifest_target))
        for name, text in members.items():
            archive.writestr(name, text)
    return buffer.getvalue()
