import functools
import itertools
import timeit

import numpy as np
import scipy.sparse
import scipy.sparse.csgraph
import tqdm

import csrmst


def compute(A: scipy.sparse.csr_matrix) -> None:
    (_, _, tv) = csrmst.mst_prim(A, full=True)
    expected = scipy.sparse.csgraph.minimum_spanning_tree(A).sum()
    assert np.isclose(float(tv.sum()), expected), (float(tv.sum()), expected)


def test():
    combs = itertools.product([100, 1000, 5000], [0.001, 0.01, 0.05])
    results = []
    pbar = tqdm.tqdm(combs, total=3 * 3)

    for n_vertices, density in pbar:
        A = scipy.sparse.random(n_vertices, n_vertices, density=density, random_state=1892, format="csr")
        A = A.maximum(A.T).tocsr()
        fn = functools.partial(compute, A)
        pbar.set_description(str((n_vertices, density)))
        min_time = min(timeit.repeat(fn, repeat=2, number=3))
        results.append(((n_vertices, density, A.nnz), min_time))

    for item in results:
        print(item)


if __name__ == "__main__":
    test()
