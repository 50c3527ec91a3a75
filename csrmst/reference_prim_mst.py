"""Textbook O(n^2) Prim's MST over a dense adjacency matrix.

Kept as an independent reference for the heap-based implementation in
:mod:`csrmst.core`. Missing edges are marked with ``np.inf``.
"""

import typing as t

import numpy as np
import numpy.typing as npt


def prim_mst(
    graph: npt.NDArray[np.float64], ind_root: int = 0
) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.float64]]:
    graph = np.asarray(graph, dtype=np.float64)
    n = len(graph)

    if n == 0:
        return (np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.float64))

    intree = np.full(n, fill_value=False)
    d = np.full(n, fill_value=np.inf)
    parent = np.full(n, fill_value=-1, dtype=np.int64)

    d[ind_root] = 0.0
    v = ind_root

    while True:
        intree[v] = True
        dist = np.inf
        next_v = -1

        for w in np.arange(n):
            if intree[w]:
                continue

            weight = graph[v, w]

            if d[w] > weight:
                d[w] = weight
                parent[w] = v

            if dist > d[w]:
                dist = d[w]
                next_v = w

        # NOTE: no finite edge leaves the tree, so the component is spanned.
        if next_v < 0:
            break

        v = next_v

    ti = np.flatnonzero(parent >= 0)
    tj = parent[ti]
    tv = graph[ti, tj]

    return (ti, tj, tv)
