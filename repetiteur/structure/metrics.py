#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains the similarity measures between bars
and bar windows.
"""
import numpy as np
from numba import jit
from scipy.spatial.distance import jaccard

RHYTHM_WEIGHT = 0.4
PITCH_WEIGHT = 0.3
CONTOUR_WEIGHT = 0.3


@jit(nopython=True)
def cosine_similarity(vec1, vec2):
    """
    cosine similarity of two float vectors, 0 for empty,
    unequal or all-zero input
    """
    if vec1.shape[0] != vec2.shape[0] or vec1.shape[0] == 0:
        return 0.0
    dot = 0.0
    mag1 = 0.0
    mag2 = 0.0
    for i in range(vec1.shape[0]):
        dot += vec1[i] * vec2[i]
        mag1 += vec1[i] * vec1[i]
        mag2 += vec2[i] * vec2[i]
    if mag1 == 0.0 or mag2 == 0.0:
        return 0.0
    return dot / (np.sqrt(mag1) * np.sqrt(mag2))


def pitch_class_vector(pitch_classes):
    vector = np.zeros(12, dtype=bool)
    vector[list(pitch_classes)] = True
    return vector


def jaccard_similarity(pitch_classes1, pitch_classes2):
    """
    Jaccard index of two pitch-class sets, 1 if both are empty
    """
    u = pitch_class_vector(pitch_classes1)
    v = pitch_class_vector(pitch_classes2)
    if not u.any() and not v.any():
        return 1.0
    return 1.0 - jaccard(u, v)


def contour_similarity(contour1, contour2):
    """
    cosine similarity of the melodic interval sequences (the shorter
    one zero-padded), clipped at 0
    """
    if len(contour1) == 0 and len(contour2) == 0:
        return 1.0
    if len(contour1) == 0 or len(contour2) == 0:
        return 0.0
    intervals1 = np.diff(np.asarray(contour1, dtype=np.float64))
    intervals2 = np.diff(np.asarray(contour2, dtype=np.float64))
    if len(intervals1) == 0 and len(intervals2) == 0:
        return 1.0
    length = max(len(intervals1), len(intervals2))
    padded1 = np.zeros(length)
    padded2 = np.zeros(length)
    padded1[: len(intervals1)] = intervals1
    padded2[: len(intervals2)] = intervals2
    return max(0.0, cosine_similarity(padded1, padded2))


def window_similarity(window_a, window_b):
    """
    weighted similarity of two equal-length bar windows:
    0.4 * rhythm cosine + 0.3 * pitch-class Jaccard + 0.3 * contour,
    each averaged over the bars.

    Parameters
    ----------
    window_a, window_b : list
        BarFeature objects

    Returns
    -------
    similarity : float
        0 for empty or unequal windows
    """
    if len(window_a) == 0 or len(window_a) != len(window_b):
        return 0.0
    rhythm = 0.0
    pitch = 0.0
    contour = 0.0
    for bar_a, bar_b in zip(window_a, window_b):
        rhythm += cosine_similarity(bar_a.rhythm, bar_b.rhythm)
        pitch += jaccard_similarity(bar_a.pitch_classes, bar_b.pitch_classes)
        contour += contour_similarity(bar_a.contour, bar_b.contour)
    n_bars = len(window_a)
    return (
        RHYTHM_WEIGHT * rhythm / n_bars
        + PITCH_WEIGHT * pitch / n_bars
        + CONTOUR_WEIGHT * contour / n_bars
    )


def cdist_local(arr1, arr2, metric):
    """
    compute array of pairwise values between
    the elements of two sequences given a metric

    Parameters
    ----------
    arr1: sequence

    arr2: sequence

    metric: callable
        a metric function

    Returns
    -------

    pdist_array: numpy 2d array
        array of pairwise values
    """
    pdist_array = np.zeros((len(arr1), len(arr2)))
    for i in range(len(arr1)):
        for j in range(len(arr2)):
            pdist_array[i, j] = metric(arr1[i], arr2[j])
    return pdist_array


def bar_similarity_matrix(features):
    """
    bar-by-bar self-similarity of a list of BarFeature objects
    """
    return cdist_local(
        features, features, lambda bar_a, bar_b: window_similarity([bar_a], [bar_b])
    )
