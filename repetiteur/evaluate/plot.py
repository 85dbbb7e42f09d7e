#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods to visualize alignments
and bar similarity
"""

import numpy as np
import matplotlib.pyplot as plt

from ..notes import note_array
from ..structure.metrics import bar_similarity_matrix

# vertical gap between the notation and the performance roll
ROLL_GAP = 20


def plot_alignment(
    unified_events,
    notation_events,
    save_file=False,
    fname="note_alignment",
    figsize=(30, 8),
    cmap="viridis",
):
    """
    plot notation notes (bottom) against performance notes (top),
    matched pairs are connected by lines colored by confidence.

    Parameters
    ----------
    unified_events : list
        UnifiedNoteEvent objects from an aligner
    notation_events : list
        NotationNoteEvent objects the stream was aligned to
    save_file : bool
        save to fname + ".png" instead of showing the figure
    """
    notation_na = note_array(notation_events)
    unified_na = note_array(unified_events)
    performed = np.array(
        [u.source.performance_id is not None for u in unified_events], dtype=bool
    )
    perf_na = unified_na[performed] if len(unified_na) else unified_na
    offset = 128 + ROLL_GAP

    f, axs = plt.subplots(1, 1, figsize=figsize)
    axs.barh(
        notation_na["pitch"],
        notation_na["duration_sec"],
        left=notation_na["onset_sec"],
        height=0.8,
        color="#444444",
    )
    axs.barh(
        perf_na["pitch"] + offset,
        perf_na["duration_sec"],
        left=perf_na["onset_sec"],
        height=0.8,
        color="#1f77b4",
    )

    colormap = plt.get_cmap(cmap)
    notation_onset = {s_note.id: s_note.start_time for s_note in notation_events}
    for u in unified_events:
        source = u.source
        if source.performance_id is None or source.notation_id not in notation_onset:
            continue
        axs.plot(
            [notation_onset[source.notation_id], u.start_time],
            [u.midi, u.midi + offset],
            "o-",
            lw=1,
            c=colormap(source.confidence),
        )

    axs.set_xlabel("time (sec)")
    axs.set_yticks([64, 64 + offset])
    axs.set_yticklabels(["notation", "performance"])

    if save_file:
        plt.savefig(fname + ".png")
        plt.close(f)
    else:
        plt.show()


def plot_bar_similarity(
    features,
    save_file=False,
    fname="bar_similarity",
    figsize=(8, 8),
):
    """
    plot the bar self-similarity matrix of a list of BarFeature objects

    Returns
    -------
    similarity : np.ndarray
        the plotted matrix
    """
    similarity = bar_similarity_matrix(features)
    measures = [bar.measure for bar in features]

    f, axs = plt.subplots(1, 1, figsize=figsize)
    image = axs.matshow(similarity, vmin=0.0, vmax=1.0, origin="lower")
    f.colorbar(image, ax=axs)
    if len(measures) > 0:
        ticks = np.arange(0, len(measures), max(1, len(measures) // 16))
        axs.set_xticks(ticks)
        axs.set_xticklabels([measures[i] for i in ticks])
        axs.set_yticks(ticks)
        axs.set_yticklabels([measures[i] for i in ticks])
    axs.set_xlabel("bar")
    axs.set_ylabel("bar")

    if save_file:
        plt.savefig(fname + ".png")
        plt.close(f)
    else:
        plt.show()
    return similarity
