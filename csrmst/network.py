import typing as t

import numpy as np
import numpy.typing as npt
import scipy.sparse
import scipy.sparse.csgraph


class MatrixNetwork:
    """Immutable compressed-sparse-row view of a weighted graph.

    Row ``v`` of the adjacency matrix lists the out-neighbors of vertex ``v``:
    its column indices are ``ci[rp[v]:rp[v + 1]]`` and the matching edge
    weights are ``vals[rp[v]:rp[v + 1]]``.

    Parameters
    ----------
    n : int
        Number of vertices.

    rp : array-like of shape (n + 1,)
        Row pointers. Must start at 0, be non-decreasing and end at ``len(ci)``.

    ci : array-like of shape (m,)
        Column index (neighbor id) of every stored entry, in ``[0, n)``.

    vals : array-like of shape (m,)
        Edge weight of every stored entry. Must be finite and non-negative.
        Each (row, column) pair may be stored at most once.
    """

    def __init__(self, n: int, rp: npt.ArrayLike, ci: npt.ArrayLike, vals: npt.ArrayLike):
        n = int(n)
        rp = np.array(rp, dtype=np.int64).ravel()
        ci = np.array(ci, dtype=np.int64).ravel()
        vals = np.array(vals).ravel()

        if vals.dtype.kind not in "iuf":
            vals = vals.astype(np.float64)

        _check_csr(n, rp, ci, vals)

        for arr in (rp, ci, vals):
            arr.setflags(write=False)

        self.n = n
        self.rp = rp
        self.ci = ci
        self.vals = vals

    @classmethod
    def from_sparse(cls, A: t.Any) -> "MatrixNetwork":
        """Build a network from a square scipy.sparse matrix or dense array."""
        if scipy.sparse.issparse(A):
            A = scipy.sparse.csr_matrix(A, copy=True)
        else:
            A = np.asarray(A)
            if A.ndim != 2:
                raise ValueError(f"Adjacency matrix must be 2-dimensional ({A.ndim=}).")
            A = scipy.sparse.csr_matrix(A)

        if A.shape[0] != A.shape[1]:
            raise ValueError(f"Adjacency matrix must be square ({A.shape=}).")

        A.sum_duplicates()
        return cls(A.shape[0], A.indptr, A.indices, A.data)

    @classmethod
    def from_edges(
        cls,
        ei: npt.ArrayLike,
        ej: npt.ArrayLike,
        n: t.Optional[int] = None,
        weights: t.Optional[npt.ArrayLike] = None,
    ) -> "MatrixNetwork":
        """Build a network from parallel source/target lists.

        ``n`` defaults to one more than the largest vertex id, and every edge
        gets weight 1.0 unless ``weights`` is given. Repeated entries are summed.
        """
        ei = np.asarray(ei, dtype=np.int64).ravel()
        ej = np.asarray(ej, dtype=np.int64).ravel()

        if ei.size != ej.size:
            raise ValueError(f"Mismatch in {ei.size=} and {ej.size=}.")

        if n is None:
            n = int(max(ei.max(initial=-1), ej.max(initial=-1))) + 1

        if weights is None:
            weights = np.ones(ei.size, dtype=np.float64)

        weights = np.asarray(weights).ravel()

        if weights.size != ei.size:
            raise ValueError(f"Mismatch in {ei.size=} and {weights.size=}.")

        if ei.size and (min(ei.min(), ej.min()) < 0 or max(ei.max(), ej.max()) >= n):
            raise ValueError(f"Edge endpoints must lie in [0, {n}).")

        A = scipy.sparse.coo_matrix((weights, (ei, ej)), shape=(n, n)).tocsr()
        A.sum_duplicates()
        return cls(n, A.indptr, A.indices, A.data)

    @property
    def shape(self) -> t.Tuple[int, int]:
        return (self.n, self.n)

    @property
    def ndim(self) -> int:
        return 2

    @property
    def nnz(self) -> int:
        return int(self.ci.size)

    def __repr__(self) -> str:
        return f"MatrixNetwork(n={self.n}, nnz={self.nnz}, dtype={self.vals.dtype})"

    def _check_vertex(self, v: int) -> int:
        v = int(v)
        if not 0 <= v < self.n:
            raise IndexError(f"Vertex {v} out of range for a graph with {self.n} vertices.")
        return v

    def edge_range(self, v: int) -> range:
        v = self._check_vertex(v)
        return range(int(self.rp[v]), int(self.rp[v + 1]))

    def neighbors(self, v: int) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[t.Any]]:
        """Neighbor ids and edge weights of ``v``, in storage order."""
        v = self._check_vertex(v)
        lo, hi = self.rp[v], self.rp[v + 1]
        return (self.ci[lo:hi], self.vals[lo:hi])

    def edge_weight(self, u: int, v: int) -> t.Any:
        """Weight of the first stored ``u -> v`` entry."""
        u = self._check_vertex(u)
        for ind in range(self.rp[u], self.rp[u + 1]):
            if self.ci[ind] == v:
                return self.vals[ind]
        raise KeyError((u, v))

    def is_empty(self) -> bool:
        return self.n == 0

    def is_undirected(self) -> bool:
        """Check that every (u, v, w) entry is matched by a (v, u, w) entry."""
        ei, ej = self.directed_edges()
        fwd = np.lexsort((self.vals, ej, ei))
        bwd = np.lexsort((self.vals, ei, ej))
        return (
            np.array_equal(ei[fwd], ej[bwd])
            and np.array_equal(ej[fwd], ei[bwd])
            and np.array_equal(self.vals[fwd], self.vals[bwd])
        )

    def is_connected(self) -> bool:
        """Check the graph for (strong) connectivity."""
        if self.is_empty():
            return False
        n_components = scipy.sparse.csgraph.connected_components(
            self.sparse(), directed=True, connection="strong", return_labels=False
        )
        return n_components == 1

    def sparse(self) -> scipy.sparse.csr_matrix:
        return scipy.sparse.csr_matrix((self.vals, self.ci, self.rp), shape=self.shape, copy=True)

    def sparse_transpose(self) -> scipy.sparse.csc_matrix:
        # NOTE: the same arrays read as CSC describe the transpose.
        return scipy.sparse.csc_matrix((self.vals, self.ci, self.rp), shape=self.shape, copy=True)

    def transpose(self) -> "MatrixNetwork":
        return MatrixNetwork.from_sparse(self.sparse_transpose())

    @property
    def T(self) -> "MatrixNetwork":
        return self.transpose()

    def __matmul__(self, b: npt.ArrayLike) -> npt.NDArray[t.Any]:
        return self.sparse() @ np.asarray(b)

    def rmatvec(self, b: npt.ArrayLike) -> npt.NDArray[t.Any]:
        return self.sparse_transpose() @ np.asarray(b)

    def _row_ids(self) -> npt.NDArray[np.int64]:
        return np.repeat(np.arange(self.n, dtype=np.int64), np.diff(self.rp))

    def directed_edges(self) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64]]:
        """All stored entries, both sides of undirected edges included."""
        return (self._row_ids(), self.ci.copy())

    def undirected_edges(self) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64]]:
        """Stored entries with ``target >= source``."""
        ei, ej = self.directed_edges()
        keep = ej >= ei
        return (ei[keep], ej[keep])

    def random_edge(
        self, rng: t.Union[None, int, np.random.Generator] = None
    ) -> t.Tuple[int, int, int]:
        """Pick a uniformly random stored entry.

        Returns
        -------
        (ei, ej, ind) : tuple of int
            Source, target and position of the entry in ``ci``/``vals``.
        """
        if self.nnz == 0:
            raise ValueError("Cannot sample an edge from a graph with no edges.")
        rng = np.random.default_rng(rng)
        ind = int(rng.integers(self.nnz))
        ei = int(np.searchsorted(self.rp, ind, side="right")) - 1
        return (ei, int(self.ci[ind]), ind)


def _check_csr(n: int, rp: np.ndarray, ci: np.ndarray, vals: np.ndarray) -> None:
    if n < 0:
        raise ValueError(f"Number of vertices must be non-negative ({n=}).")
    if rp.size != n + 1:
        raise ValueError(f"Row pointer array must have n + 1 entries ({rp.size=}, {n=}).")
    if rp[0] != 0:
        raise ValueError(f"Row pointers must start at 0 ({rp[0]=}).")
    if np.any(np.diff(rp) < 0):
        raise ValueError("Row pointers must be non-decreasing.")
    if ci.size != vals.size:
        raise ValueError(f"Mismatch in {ci.size=} and {vals.size=}.")
    if rp[-1] != ci.size:
        raise ValueError(f"Last row pointer must equal the number of entries ({rp[-1]=}, {ci.size=}).")
    if ci.size and (ci.min() < 0 or ci.max() >= n):
        raise ValueError(f"Column indices must lie in [0, {n}).")
    if not np.all(np.isfinite(vals)):
        raise ValueError("Edge weights must be finite.")
    if np.any(vals < 0):
        raise ValueError("Edge weights must be non-negative.")
    keys = np.repeat(np.arange(n, dtype=np.int64), np.diff(rp)) * n + ci
    if np.unique(keys).size != keys.size:
        raise ValueError("Duplicate entries for the same (row, column) pair; sum them first.")


def empty_graph(n: int = 0) -> MatrixNetwork:
    """Graph with ``n`` vertices and no edges."""
    return MatrixNetwork(
        n, np.zeros(n + 1, dtype=np.int64), np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.float64)
    )


def as_network(A: t.Any) -> MatrixNetwork:
    if isinstance(A, MatrixNetwork):
        return A
    return MatrixNetwork.from_sparse(A)
