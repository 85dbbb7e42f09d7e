#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the fatal errors raised while reading
notation documents. Malformed notes are never fatal.
"""


class ScoreParseError(ValueError):
    """Base class for documents that cannot be turned into note events."""


class DocumentNotFoundError(ScoreParseError, FileNotFoundError):
    pass


class HTMLDocumentError(ScoreParseError):
    """The content is an HTML (error) page instead of a score."""


class NotMusicXMLError(ScoreParseError):
    pass


class UnsupportedRootError(ScoreParseError):
    pass


class EmptyScoreError(ScoreParseError):
    """The score has no parts or no measures."""


class PackageError(ScoreParseError):
    """A compressed package that does not yield a notation document."""
