"""Indexed binary min-heap over shared arrays.

The heap is laid out in ``T[1..n_heap]`` (slot 0 is unused) and keyed by ``d``.
``L`` maps every vertex to its heap status:

- ``L[v] == 0``: ``v`` never entered the heap;
- ``L[v] > 0``: ``v`` sits at heap slot ``L[v]``;
- ``L[v] == -1``: ``v`` was popped and is finalized.

Children of slot ``k`` are ``2k`` and ``2k + 1``, its parent is ``k // 2``.
Every swap updates ``L`` for both vertices involved. Elements with equal keys
are never swapped.
"""

import typing as t

import numpy as np
import numpy.typing as npt


def heap_sift_down(
    T: npt.NDArray[np.int64],
    L: npt.NDArray[np.int64],
    d: npt.NDArray[np.float64],
    k: int,
    n_heap: int,
) -> None:
    kt = T[k]

    while True:
        i = 2 * k

        if i > n_heap:
            break

        it = T[i]

        # NOTE: with two children, the right one wins only if strictly smaller.
        if i < n_heap and d[T[i + 1]] < d[it]:
            i += 1
            it = T[i]

        if not d[it] < d[kt]:
            break

        T[k] = it
        L[it] = k
        T[i] = kt
        L[kt] = i
        k = i


def heap_sift_up(
    T: npt.NDArray[np.int64],
    L: npt.NDArray[np.int64],
    d: npt.NDArray[np.float64],
    k: int,
) -> None:
    kt = T[k]

    while k > 1:
        j = k // 2
        jt = T[j]

        if not d[jt] > d[kt]:
            break

        T[j] = kt
        L[kt] = j
        T[k] = jt
        L[jt] = k
        k = j


def heap_pop(
    T: npt.NDArray[np.int64],
    L: npt.NDArray[np.int64],
    d: npt.NDArray[np.float64],
    n_heap: int,
) -> t.Tuple[int, int]:
    """Remove the minimum, mark it finalized and restore the heap.

    Returns
    -------
    (v, n_heap) : tuple of int
        The popped vertex and the new heap size.
    """
    if n_heap < 1:
        raise IndexError("Pop from an empty heap.")

    v = int(T[1])
    L[v] = -1

    last = T[n_heap]
    n_heap -= 1

    if n_heap > 0:
        T[1] = last
        L[last] = 1
        heap_sift_down(T, L, d, 1, n_heap)

    return (v, n_heap)


def heap_push_or_decrease(
    T: npt.NDArray[np.int64],
    L: npt.NDArray[np.int64],
    d: npt.NDArray[np.float64],
    w: int,
    n_heap: int,
) -> int:
    """Insert ``w`` or restore its position after ``d[w]`` was lowered.

    Keys only ever decrease, so moving ``w`` toward the root is enough.
    Returns the new heap size.
    """
    k = int(L[w])

    if k < 0:
        raise ValueError(f"Vertex {w} is already finalized.")

    if k == 0:
        n_heap += 1
        T[n_heap] = w
        L[w] = n_heap
        k = n_heap

    heap_sift_up(T, L, d, k)
    return n_heap
