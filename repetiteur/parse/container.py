#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to turn raw document bytes into
MusicXML text: package (.mxl) unwrapping, decoding and sniffing.
"""
import io
import os
import zipfile
import xml.etree.ElementTree as ET

from .errors import (
    DocumentNotFoundError,
    HTMLDocumentError,
    NotMusicXMLError,
    PackageError,
)

ZIP_MAGIC = b"PK\x03\x04"
MANIFEST_PATH = "META-INF/container.xml"
XML_SUFFIXES = (".xml", ".musicxml")
XML_PREFIXES = ("<?xml", "<score-partwise", "<score-timewise", "<!doctype score-")


def strip_namespaces(root):
    """
    remove "{namespace}" prefixes from all tags of an element tree
    (in place) and return the root.
    """
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]
    return root


def is_package(data):
    return isinstance(data, (bytes, bytearray)) and bytes(data[:4]) == ZIP_MAGIC


def _manifest_root_path(archive):
    try:
        manifest = archive.read(MANIFEST_PATH)
    except KeyError:
        return None
    try:
        root = strip_namespaces(ET.fromstring(manifest))
    except ET.ParseError:
        return None
    rootfile = root.find(".//rootfile")
    if rootfile is None:
        return None
    return rootfile.get("full-path") or None


def unwrap_package(data):
    """
    extract the score document from a compressed MusicXML package.

    The manifest (META-INF/container.xml) is preferred. Without a
    usable manifest the largest XML member is taken.

    Parameters
    ----------
    data : bytes
        the raw package content

    Returns
    -------
    document : bytes
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(bytes(data)))
    except zipfile.BadZipFile as e:
        raise PackageError("corrupt MusicXML package: {}".format(e)) from e

    with archive:
        full_path = _manifest_root_path(archive)
        if full_path is not None:
            try:
                return archive.read(full_path)
            except KeyError:
                raise PackageError(
                    "MXL container points to missing file: {}".format(full_path)
                )

        candidates = [
            info
            for info in archive.infolist()
            if info.filename.lower().endswith(XML_SUFFIXES)
            and info.filename.lower() != MANIFEST_PATH.lower()
            and not info.is_dir()
        ]
        if len(candidates) == 0:
            raise PackageError("MXL contains no XML score file")
        largest = max(candidates, key=lambda info: info.file_size)
        return archive.read(largest.filename)


def decode_document(data):
    if isinstance(data, str):
        text = data
    elif bytes(data[:2]) in (b"\xff\xfe", b"\xfe\xff"):
        text = bytes(data).decode("utf-16")
    else:
        text = bytes(data).decode("utf-8", errors="replace")
    return text.lstrip("\ufeff").strip()


def looks_like_html(text):
    head = text[:64].lower()
    return head.startswith("<!doctype html") or head.startswith("<html")


def looks_like_xml(text):
    return text[:64].lower().startswith(XML_PREFIXES)


def read_document_text(data):
    """
    turn bare or packaged document content into checked MusicXML text.
    """
    if is_package(data):
        data = unwrap_package(data)
    text = decode_document(data)

    if looks_like_html(text):
        raise HTMLDocumentError(
            "Fetched HTML instead of MusicXML, check the document path"
        )
    if not looks_like_xml(text):
        raise NotMusicXMLError(
            "Not valid MusicXML. First chars: {!r}".format(text[:80])
        )
    return text


def read_document_file(path):
    if not os.path.isfile(path):
        raise DocumentNotFoundError("notation document not found: {}".format(path))
    with open(path, "rb") as f:
        return f.read()
