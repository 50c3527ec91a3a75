from .core import mst_prim, mst_prim_total
from .network import MatrixNetwork, as_network, empty_graph
from . import heap
from . import reference_prim_mst
