import logging
import operator
import typing as t

import numpy as np
import numpy.typing as npt

from . import heap
from .network import MatrixNetwork, as_network


logger = logging.getLogger(__name__)


def _traverse_from_root(
    graph: MatrixNetwork,
    root: int,
    T: npt.NDArray[np.int64],
    L: npt.NDArray[np.int64],
    d: npt.NDArray[np.float64],
    pred: npt.NDArray[np.int64],
) -> int:
    """Grow the tree of ``root`` until its heap drains. Returns the number of finalized vertices."""
    rp, ci, ai = graph.rp, graph.ci, graph.vals

    T[1] = root
    L[root] = 1
    d[root] = 0.0
    n_heap = 1
    n_finalized = 0

    while n_heap > 0:
        v, n_heap = heap.heap_pop(T, L, d, n_heap)
        n_finalized += 1

        for ei in range(rp[v], rp[v + 1]):
            w = ci[ei]

            if L[w] < 0:
                continue

            # NOTE: relax with the raw edge weight, not d[v] + ai[ei].
            ew = ai[ei]
            if d[w] > ew:
                d[w] = ew
                pred[w] = v
                n_heap = heap.heap_push_or_decrease(T, L, d, w, n_heap)

    return n_finalized


def _collect_tree_edges(
    graph: MatrixNetwork, pred: npt.NDArray[np.int64]
) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[t.Any]]:
    ti = np.flatnonzero(pred >= 0).astype(np.int64, copy=False)
    tj = pred[ti]
    tv = np.zeros(ti.size, dtype=graph.vals.dtype)

    rp, ci, ai = graph.rp, graph.ci, graph.vals

    for k, (i, j) in enumerate(zip(ti, tj)):
        for ind in range(rp[i], rp[i + 1]):
            if ci[ind] == j:
                tv[k] = ai[ind]
                break

    return (ti, tj, tv)


def mst_prim(
    A: t.Any,
    full: bool = False,
    start_vertex: int = 0,
) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[t.Any]]:
    """Compute a minimum spanning tree (or forest) with Prim's algorithm.

    The tree grows from ``start_vertex`` using an indexed binary heap with
    decrease-key. Ties between equally heavy candidate edges are broken by the
    order in which their endpoints were discovered.

    Parameters
    ----------
    A : MatrixNetwork, scipy.sparse matrix or array-like of shape (n, n)
        Undirected graph with finite, non-negative edge weights. Only stored
        entries are edges, so explicit zeros in a sparse matrix are zero-weight
        edges while zeros in a dense array are missing edges.

    full : bool, default=False
        If False, only the connected component of ``start_vertex`` is spanned
        and every other vertex is left without a parent. If True, traversals
        are restarted from the remaining unvisited vertices, in cyclic order
        after ``start_vertex``, yielding a minimum spanning forest with one tree
        per connected component.

    start_vertex : int, default=0
        Root of the first traversal.

    Returns
    -------
    ti : npt.NDArray[np.int64] of shape (n_edges,)
        Child endpoint of every tree edge, in increasing order.

    tj : npt.NDArray[np.int64] of shape (n_edges,)
        Parent endpoint of every tree edge.

    tv : npt.NDArray of shape (n_edges,)
        Edge weights, with the dtype of the input weights.

    Raises
    ------
    ValueError
        If the input is malformed or not undirected, or ``start_vertex`` is
        not a vertex of the graph.
    """
    graph = as_network(A)

    if not graph.is_undirected():
        raise ValueError("Prim's algorithm requires an undirected graph (symmetric adjacency matrix).")

    n = graph.n

    if n == 0:
        return (np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64), np.zeros(0, dtype=graph.vals.dtype))

    try:
        start_vertex = operator.index(start_vertex)
    except TypeError as err:
        raise ValueError(f"Invalid {start_vertex=}; vertex ids must be integers.") from err

    if not 0 <= start_vertex < n:
        raise ValueError(f"Invalid {start_vertex=} for a graph with {n} vertices.")

    logger.debug("Running Prim's MST on %d vertices and %d stored entries (full=%s).", n, graph.nnz, full)

    d = np.full(n, fill_value=np.inf)
    pred = np.full(n, fill_value=-1, dtype=np.int64)
    T = np.zeros(n + 1, dtype=np.int64)
    L = np.zeros(n, dtype=np.int64)

    n_visited = _traverse_from_root(graph, start_vertex, T, L, d, pred)
    n_trees = 1

    if full:
        for it in range(1, n):
            if n_visited == n:
                break

            root = (start_vertex + it) % n

            # NOTE: heaps drain completely, so L only holds 0 or -1 between traversals.
            if L[root] < 0:
                continue

            logger.debug("Starting a new tree at vertex %d.", root)
            n_visited += _traverse_from_root(graph, root, T, L, d, pred)
            n_trees += 1

    (ti, tj, tv) = _collect_tree_edges(graph, pred)
    logger.debug("Prim's MST found %d edges in %d tree(s).", ti.size, n_trees)

    return (ti, tj, tv)


def mst_prim_total(A: t.Any, full: bool = False, start_vertex: int = 0) -> float:
    """Total weight of the tree (or forest) returned by :func:`mst_prim`."""
    (_, _, tv) = mst_prim(A, full=full, start_vertex=start_vertex)
    return float(tv.sum())
