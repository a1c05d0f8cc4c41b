"""Signal co-occurrence graph and single-level greedy modularity clustering.

The partition is found with one level of local moving only: every node
starts in its own community and is repeatedly moved into the neighbouring
community with the best modularity gain until a full sweep moves nothing.
There is no coarsening phase, so this is NOT multi-level Louvain. Adding
aggregation would change cluster membership for identical inputs.

Edges are undirected and unweighted, stored canonically as (min, max)
name pairs.
"""

from __future__ import annotations

from collections import defaultdict
from itertools import combinations
from typing import Iterable

from ..graph.builder import AnyGraph, get_all_signal_names
from ..graph.models import LAMBDA_HANDLER
from ..exceptions import ClusteringError, ErrorCode
from ..logging_config import get_logger, log_signal_error

logger = get_logger(__name__)

Edge = tuple[str, str]


def build_cooccurrence_graph(graph: AnyGraph) -> tuple[list[str], set[Edge]]:
    """Nodes and edges of the signal co-occurrence graph.

    Two signals are linked when they are emitted from the same file, or
    when they are connected to a handler of the same name. Lambda handlers
    all share one marker and do not link signals.

    Returns:
        (nodes, edges) with *nodes* sorted and *edges* canonical.
    """
    nodes = get_all_signal_names(graph)

    by_file: dict[str, set[str]] = defaultdict(set)
    for name, emissions in graph.emissions.items():
        for emission in emissions:
            by_file[emission.file_path].add(name)

    by_handler: dict[str, set[str]] = defaultdict(set)
    for name, connections in (getattr(graph, "connections", None) or {}).items():
        for conn in connections:
            if conn.is_lambda or conn.handler == LAMBDA_HANDLER or not conn.handler:
                continue
            by_handler[conn.handler].add(name)

    edges: set[Edge] = set()
    for group in (*by_file.values(), *by_handler.values()):
        for a, b in combinations(sorted(group), 2):
            edges.add((a, b))

    return nodes, edges


def induced_subgraph(members: Iterable[str], edges: Iterable[Edge]) -> tuple[list[str], set[Edge]]:
    """Restrict a graph to *members*: keep edges with both endpoints inside."""
    member_set = set(members)
    return sorted(member_set), {(a, b) for a, b in edges if a in member_set and b in member_set}


def detect_communities(
    nodes: list[str],
    edges: set[Edge],
    min_gain: float = 1e-6,
    max_sweeps: int = 100,
) -> tuple[dict[int, set[str]], float]:
    """Partition *nodes* by greedy local moving.

    Args:
        nodes: Node identifiers; visited in sorted order.
        edges: Canonical undirected edges between nodes.
        min_gain: A move must improve modularity by more than this.
        max_sweeps: Safety limit on full sweeps over the nodes.

    Returns:
        (communities, modularity) where *communities* maps ids 0..k-1 to
        member sets. Ids follow the sorted order of each community's
        smallest member.
    """
    nodes = sorted(nodes)
    if not nodes:
        return {}, 0.0

    m = float(len(edges))
    if m == 0:
        return {i: {n} for i, n in enumerate(nodes)}, 0.0

    two_m = 2.0 * m

    neighbors: dict[str, list[str]] = defaultdict(list)
    degree: dict[str, float] = defaultdict(float)
    for a, b in sorted(edges):
        neighbors[a].append(b)
        neighbors[b].append(a)
        degree[a] += 1.0
        degree[b] += 1.0

    # Initialize: each node in its own community
    node_comm: dict[str, int] = {n: i for i, n in enumerate(nodes)}
    sigma_tot: dict[int, float] = {i: degree.get(n, 0.0) for i, n in enumerate(nodes)}

    sweeps = 0
    for sweeps in range(1, max_sweeps + 1):
        moved = False
        for node in nodes:
            current_comm = node_comm[node]
            ki = degree.get(node, 0.0)

            # Edges from node to each neighbouring community, in first-seen order
            comm_edges: dict[int, float] = {}
            for neighbor in neighbors.get(node, ()):
                comm = node_comm[neighbor]
                comm_edges[comm] = comm_edges.get(comm, 0.0) + 1.0

            ki_in_current = comm_edges.get(current_comm, 0.0)
            sigma_current = sigma_tot[current_comm] - ki
            remove_cost = ki_in_current / two_m - (sigma_current * ki) / (two_m * two_m)

            best_comm = current_comm
            best_gain = min_gain
            for comm_id, ki_in_target in comm_edges.items():
                if comm_id == current_comm:
                    continue
                add_gain = ki_in_target / two_m - (sigma_tot[comm_id] * ki) / (two_m * two_m)
                net_gain = add_gain - remove_cost
                if net_gain > best_gain:
                    best_gain = net_gain
                    best_comm = comm_id

            if best_comm != current_comm:
                sigma_tot[current_comm] -= ki
                sigma_tot[best_comm] += ki
                node_comm[node] = best_comm
                moved = True

        if not moved:
            break
    else:
        error = ClusteringError(
            f"Community sweep cap reached ({max_sweeps}) before convergence",
            code=ErrorCode.SI400,
            context={"nodes": len(nodes), "max_sweeps": max_sweeps},
        )
        log_signal_error(logger, error)

    modularity = compute_modularity(edges, degree, node_comm, m)

    grouped: dict[int, set[str]] = defaultdict(set)
    for node, comm in node_comm.items():
        grouped[comm].add(node)
    ordered = sorted(grouped.values(), key=min)
    communities = {i: members for i, members in enumerate(ordered)}

    logger.debug(
        f"Communities: {len(nodes)} nodes, {int(m)} edges -> {len(communities)} "
        f"communities after {sweeps} sweep(s), Q={modularity:.4f}"
    )
    return communities, modularity


def compute_modularity(
    edges: Iterable[Edge],
    degree: dict[str, float],
    node_comm: dict[str, int],
    m: float,
) -> float:
    """Compute modularity Q = sum_c [L_c/m - (sigma_c/2m)^2].

    Where:
      L_c = number of edges within community c
      sigma_c = sum of degrees of nodes in community c
      m = number of undirected edges

    The degree dict double-counts (each edge adds 1 to both endpoints),
    so sum(degrees) = 2*m.
    """
    if m == 0:
        return 0.0

    e_in = 0.0
    for a, b in edges:
        if node_comm.get(a) == node_comm.get(b):
            e_in += 1.0

    sigma: dict[int, float] = defaultdict(float)
    for node, deg in degree.items():
        comm = node_comm.get(node)
        if comm is not None:
            sigma[comm] += deg

    four_m_sq = 4.0 * m * m
    null_term = sum(s * s for s in sigma.values()) / four_m_sq
    return e_in / m - null_term
