#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to evaluate
- note alignment via f scores for match, insertion, and deletion
- timing of matched notes via asynchrony
"""
from collections import Counter
from typing import List, Dict, Tuple, Union, Any
import numpy as np

from ..align.utils import unified_to_alignment
from ..notes import UnifiedNoteEvent

ALIGNMENT_LABELS = ("match", "insertion", "deletion")


def as_alignment(items, min_confidence: float = 0.0) -> List[Dict[str, Any]]:
    """
    alignment dictionaries from either alignment dictionaries
    or a unified stream
    """
    items = list(items)
    if len(items) > 0 and isinstance(items[0], UnifiedNoteEvent):
        return unified_to_alignment(items, min_confidence=min_confidence)
    return items


def alignment_counts(alignment: List[Dict[str, Any]], types) -> Counter:
    """
    multiset of (label, score_id, performance_id) keys with a label in types
    """
    return Counter(
        (a["label"], a.get("score_id"), a.get("performance_id"))
        for a in alignment
        if a["label"] in types
    )


def fscore_alignments(
    prediction: Union[List[Dict[str, Any]], List[UnifiedNoteEvent]],
    ground_truth: List[Dict[str, Any]],
    types: Union[str, List[str]],
    return_numbers: bool = False,
    min_confidence: float = 0.0,
) -> Union[Tuple[float, float, float], Tuple[float, float, float, int, int]]:
    """
    Parameters
    ----------
    prediction: alignment dictionaries or a unified stream
    ground_truth: alignment dictionaries
    types: label or labels to evaluate, e.g. ['match', 'deletion']
    return_numbers: also return the number of predicted and true entries
    min_confidence: pairs of a unified stream below this confidence
        count as an insertion and a deletion

    Returns
    -------
    precision, recall, f score
    """
    if isinstance(types, str):
        types = [types]

    predicted = alignment_counts(as_alignment(prediction, min_confidence), types)
    expected = alignment_counts(as_alignment(ground_truth), types)
    n_pred = sum(predicted.values())
    n_gt = sum(expected.values())
    n_correct = sum((predicted & expected).values())

    if n_pred == 0 and n_gt == 0:
        # nothing predicted and nothing expected for these labels
        precision, recall, f_score = 1.0, 1.0, 1.0
    else:
        precision = n_correct / n_pred if n_pred > 0 else 0.0
        recall = n_correct / n_gt if n_gt > 0 else 0.0
        f_score = (
            2 * precision * recall / (precision + recall)
            if (precision + recall) > 0
            else 0.0
        )

    if return_numbers:
        return precision, recall, f_score, n_pred, n_gt
    return precision, recall, f_score


def print_fscore_alignments(prediction, ground_truth, min_confidence: float = 0.0) -> None:
    """
    print precision, recall and f score per alignment label
    """
    prediction = as_alignment(prediction, min_confidence)
    print("------------------")
    for alignment_type in ALIGNMENT_LABELS:
        precision, recall, f_score, n_pred, n_gt = fscore_alignments(
            prediction, ground_truth, alignment_type, return_numbers=True
        )
        print("Evaluate ", alignment_type, "(", n_pred, "predicted,", n_gt, "expected )")
        print(
            "Precision: ",
            format(precision, ".3f"),
            "Recall ",
            format(recall, ".3f"),
            "F-Score ",
            format(f_score, ".3f"),
        )
        print("------------------")


def matched_onsets(unified_events, notation_events) -> Tuple[np.ndarray, np.ndarray]:
    """
    notation and performance onsets (seconds) of all matched pairs
    in a unified stream

    Returns
    -------
    notation_onsets: np.ndarray
    performance_onsets: np.ndarray
    """
    notation_onset = {s_note.id: s_note.start_time for s_note in notation_events}
    pairs = [
        (notation_onset[u.source.notation_id], u.start_time)
        for u in unified_events
        if u.source.performance_id is not None
        and u.source.notation_id in notation_onset
    ]
    if len(pairs) == 0:
        return np.zeros(0), np.zeros(0)
    pairs = np.array(pairs, dtype=np.float64)
    return pairs[:, 0], pairs[:, 1]


def evaluate_asynchrony(
    target_onsets: np.ndarray, tracked_onsets: np.ndarray
) -> Tuple[float, float, float, float]:
    """
    Parameters
    ----------
    target_onsets: np.ndarray
    tracked_onsets: np.ndarray
        onsets in seconds, pairwise

    Returns
    -------
    median_asynch: float
        median absolute asynchrony in seconds
    lt_25ms: float
    lt_50ms: float
    lt_100ms: float
        share of pairs within 25, 50 and 100 ms
    """
    asynchrony = np.asarray(target_onsets) - np.asarray(tracked_onsets)
    if len(asynchrony) == 0:
        return 0.0, 0.0, 0.0, 0.0
    abs_asynch = np.abs(asynchrony)
    median_asynch = float(np.median(abs_asynch))
    lt_25ms = float(np.mean(abs_asynch <= 0.025))
    lt_50ms = float(np.mean(abs_asynch <= 0.05))
    lt_100ms = float(np.mean(abs_asynch <= 0.1))
    return median_asynch, lt_25ms, lt_50ms, lt_100ms
