"""
Append-only history of a simplification run.

Vertices live in an arena and are addressed by integer handles; edges are a
separate list of ``(from, to)`` handle pairs. A vertex is added once per
structurally distinct expression and nothing is ever removed.
"""

from typing import Dict, List, Optional, Tuple

from .expression_tree.core.node import Expression
from .expression_tree.expression_node import ExpressionNode


class SimplificationGraph:

    def __init__(self):
        self._vertices: List[ExpressionNode] = []
        self._edges: List[Tuple[int, int]] = []
        self._edge_set = set()
        self._index: Dict[Expression, int] = {}

    def add_vertex(self, expression: Expression) -> int:
        """Store a copy of ``expression`` unless an equal one is present; return its handle."""
        handle = self.find_vertex(expression)
        if handle is not None:
            return handle

        node = ExpressionNode(expression.copy())
        handle = len(self._vertices)
        self._vertices.append(node)
        self._index[node.root] = handle
        return handle

    def add_edge(self, source: int, target: int) -> bool:
        """Record ``source -> target``. Returns False if the edge already exists."""
        for handle in (source, target):
            if not 0 <= handle < len(self._vertices):
                raise IndexError(f"no vertex with handle {handle}")
        if (source, target) in self._edge_set:
            return False
        self._edges.append((source, target))
        self._edge_set.add((source, target))
        return True

    def find_vertex(self, expression: Expression) -> Optional[int]:
        return self._index.get(expression)

    def vertex(self, handle: int) -> ExpressionNode:
        return self._vertices[handle]

    @property
    def vertices(self) -> Tuple[ExpressionNode, ...]:
        return tuple(self._vertices)

    @property
    def edges(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(self._edges)

    def successors(self, handle: int) -> List[int]:
        return [target for source, target in self._edges if source == handle]

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, expression) -> bool:
        return isinstance(expression, Expression) and self.find_vertex(expression) is not None

    def to_dot(self, name: str = 'simplification') -> str:
        """Graphviz text with each vertex labelled by its expression string"""
        lines = [f'digraph {name} {{']
        for handle, node in enumerate(self._vertices):
            label = node.to_string().replace('\\', '\\\\').replace('"', '\\"')
            lines.append(f'    {handle} [label="{label}"];')
        for source, target in self._edges:
            lines.append(f'    {source} -> {target};')
        lines.append('}')
        return '\n'.join(lines) + '\n'

    def save_graph_to_file(self, path: str):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_dot())
