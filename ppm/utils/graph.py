import logging
from collections import deque

import networkx as nx

logger = logging.getLogger(__name__)


def build_graph(nodes, edges):
    """
    Build a directed graph from a node collection and (source, target) pairs.

    Edges that name a node outside ``nodes`` are dropped, as are self loops
    caused by duplicate ids. Cycles are allowed.

    Args:
        nodes: Iterable of node ids, or a dict of {node_id: attributes}
        edges: Iterable of (source_id, target_id) pairs

    Returns:
        nx.DiGraph: Graph with nodes in the given order
    """
    G = nx.DiGraph()

    if isinstance(nodes, dict):
        for node_id, attrs in nodes.items():
            G.add_node(node_id, **(attrs or {}))
    else:
        for node_id in nodes:
            G.add_node(node_id)

    for source, target in edges:
        if source in G and target in G:
            G.add_edge(source, target)
        else:
            logger.debug("Ignoring edge %s -> %s with unknown endpoint", source, target)

    return G


def build_task_graph(tasks):
    """Build a directed graph representing explicit task dependencies"""
    G = nx.DiGraph()

    # Add task nodes
    for task in tasks:
        G.add_node(task.id, node_type="task", task=task)

    # Add task dependencies (edges)
    for task in tasks:
        for dep_id in task.dependencies:
            if dep_id in G:  # Ensure dependency exists
                G.add_edge(dep_id, task.id)

    if not nx.is_directed_acyclic_graph(G):
        logger.warning("Task dependencies contain cycles")

    return G


def kahn_order(graph, order_hint=None):
    """
    Topologically order a graph that may contain cycles.

    Nodes that never reach in-degree zero (members of a cycle and everything
    downstream of one) are left out of the order rather than raising, unlike
    ``nx.topological_sort``.

    Args:
        graph: nx.DiGraph
        order_hint: Optional sequence fixing the seed order of the ready queue

    Returns:
        tuple: (ordered node ids, excluded node ids)
    """
    in_degree = {node: degree for node, degree in graph.in_degree()}

    if order_hint is not None:
        seed = list(dict.fromkeys(order_hint))
    else:
        seed = list(graph.nodes())
    seen = set(seed)
    seed.extend(node for node in graph.nodes() if node not in seen)

    ready = deque(node for node in seed if node in graph and in_degree[node] == 0)
    order = []

    while ready:
        node = ready.popleft()
        order.append(node)
        for succ in graph.successors(node):
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                ready.append(succ)

    resolved = set(order)
    excluded = [node for node in seed if node in graph and node not in resolved]
    if excluded:
        logger.warning(
            "Dependency graph has a cycle; %d node(s) left out of the order: %s",
            len(excluded),
            ", ".join(str(node) for node in excluded),
        )

    return order, excluded
