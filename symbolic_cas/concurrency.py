"""
Execution strategies for one simplification pass.

``SequentialStrategy`` is the plain recursive pass. ``ConcurrentStrategy``
runs the same rule catalogue as a fork-join: the operands of a large enough
node are simplified as parallel tasks, each on its own copy of the subtree,
and the parent's rule fires only after every task has been joined. The pool
is scoped to the call that opened it, so no task outlives its parent.
"""

from concurrent.futures import ThreadPoolExecutor, wait, ALL_COMPLETED
from enum import Enum
from typing import Callable, Optional

from .expression_tree.core.node import Expression
from .logging_system import log_debug


class TaskState(Enum):
    """Lifecycle of one concurrent rewrite call"""
    DISPATCHED = 'dispatched'
    SUBTASKS_SPAWNED = 'subtasks_spawned'
    JOINED = 'joined'
    COMBINED = 'combined'


TransitionListener = Callable[[TaskState, Expression, int], None]


class SequentialStrategy:
    """Single-threaded, fully synchronous pass"""

    def simplify(self, expression: Expression) -> Expression:
        return expression.simplify()


class ConcurrentStrategy:
    """
    Fork-join simplification pass.

    Args:
        max_workers: Threads per fork; defaults to one per operand
        parallel_depth: Nodes at this depth or deeper are simplified sequentially
        min_parallel_size: Subtrees smaller than this are simplified sequentially
        listener: Optional callback receiving every task state transition
    """

    def __init__(self, max_workers: Optional[int] = None, parallel_depth: int = 2,
                 min_parallel_size: int = 3, listener: Optional[TransitionListener] = None):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if parallel_depth < 0:
            raise ValueError(f"parallel_depth must be non-negative, got {parallel_depth}")
        if min_parallel_size < 1:
            raise ValueError(f"min_parallel_size must be at least 1, got {min_parallel_size}")

        self.max_workers = max_workers
        self.parallel_depth = parallel_depth
        self.min_parallel_size = min_parallel_size
        self.listener = listener

    def simplify(self, expression: Expression) -> Expression:
        return self._simplify(expression, 0)

    def _transition(self, state: TaskState, node: Expression, depth: int):
        log_debug(f"{state.value} {type(node).__name__} at depth {depth}")
        if self.listener is not None:
            self.listener(state, node, depth)

    def _should_fork(self, node: Expression, depth: int) -> bool:
        return (len(node.operands) > 1 and depth < self.parallel_depth
                and node.size() >= self.min_parallel_size)

    def _simplify(self, node: Expression, depth: int) -> Expression:
        children = node.operands
        if not children or depth >= self.parallel_depth:
            return node.simplify()

        if not self._should_fork(node, depth):
            # single operand or small subtree: descend without spawning
            results = tuple(self._simplify(child, depth + 1) for child in children)
            return node.with_operands(results)._rewrite()

        self._transition(TaskState.DISPATCHED, node, depth)
        workers = self.max_workers or len(children)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._simplify, child.copy(), depth + 1)
                       for child in children]
            self._transition(TaskState.SUBTASKS_SPAWNED, node, depth)
            wait(futures, return_when=ALL_COMPLETED)
        self._transition(TaskState.JOINED, node, depth)

        # result() re-raises, so the first failing operand in order wins
        results = tuple(future.result() for future in futures)
        combined = node.with_operands(results)._rewrite()
        self._transition(TaskState.COMBINED, node, depth)
        return combined
