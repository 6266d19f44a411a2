from typing import Dict, List, Set
import logging


class DependencyGraph:
    """Orders resource kinds so dependents are deleted before what they depend on.

    ``add_node(name, prerequisites)`` means every prerequisite runs before
    ``name``. When several kinds are ready at once they keep the order they
    were added in, so a hand-written order that already respects every
    prerequisite comes back unchanged.
    """

    def __init__(self):
        self.nodes: Set[str] = set()
        self.prerequisites: Dict[str, List[str]] = {}  # node -> nodes that must run first
        self._position: Dict[str, int] = {}

    def add_node(self, name: str, prerequisites: List[str]):
        self._register(name)
        self.prerequisites[name] = list(prerequisites)
        for prereq in prerequisites:
            self._register(prereq)

    def _register(self, name: str):
        if name not in self.nodes:
            self.nodes.add(name)
            self._position[name] = len(self._position)

    def get_execution_order(self) -> List[str]:
        # Kahn's algorithm; edge U -> V means U must run before V.
        adj: Dict[str, List[str]] = {node: [] for node in self.nodes}
        in_degree: Dict[str, int] = {node: 0 for node in self.nodes}

        for node, prereqs in self.prerequisites.items():
            for prereq in prereqs:
                adj[prereq].append(node)
                in_degree[node] += 1

        queue = sorted((node for node in self.nodes if in_degree[node] == 0), key=self._position.get)

        result = []
        while queue:
            u = queue.pop(0)
            result.append(u)

            for v in adj[u]:
                in_degree[v] -= 1
                if in_degree[v] == 0:
                    queue.append(v)

            queue.sort(key=self._position.get)

        if len(result) != len(self.nodes):
            logging.error("Cycle detected in dependency graph! Falling back to declared order for the rest.")
            remaining = self.nodes - set(result)
            result.extend(sorted(remaining, key=self._position.get))

        return result
