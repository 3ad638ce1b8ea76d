"""
Rewrite driver.

``Simplifier.simplify`` applies single simplification passes until the tree
stops changing, recording every transition in its ``SimplificationGraph``.
Errors from the rules propagate untouched; the graph keeps whatever it had
accumulated when they did.
"""

import time
from typing import Optional

from .concurrency import SequentialStrategy
from .errors import RewriteCycleError
from .expression_tree.core.node import Expression
from .logging_system import LogLevel, log_info, log_rewrite_step, log_warning
from .simplification_graph import SimplificationGraph


class Simplifier:
    """
    Drives an expression to its fixpoint.

    Args:
        strategy: Object with ``simplify(expression)``; SequentialStrategy by default
        max_steps: Optional bound on changing steps per run, None for no limit
    """

    def __init__(self, strategy=None, max_steps: Optional[int] = None):
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        self.strategy = strategy if strategy is not None else SequentialStrategy()
        self.max_steps = max_steps
        self.graph = SimplificationGraph()
        self.last_step_count = 0

    def simplify(self, expression: Expression) -> Expression:
        start_time = time.time()
        current = expression.copy()
        current_handle = self.graph.add_vertex(current)
        visited = {current_handle}
        steps = 0
        self.last_step_count = 0

        while True:
            candidate = self.strategy.simplify(current)
            if current.compare(candidate):
                break

            if self.max_steps is not None and steps >= self.max_steps:
                log_warning(f"Step limit {self.max_steps} reached at {current}")
                raise RewriteCycleError(
                    f"no fixpoint for {expression} within {self.max_steps} steps")

            steps += 1
            self.last_step_count = steps
            candidate_handle = self.graph.add_vertex(candidate)
            self.graph.add_edge(current_handle, candidate_handle)
            log_rewrite_step(steps, current.to_string(), candidate.to_string())

            if candidate_handle in visited:
                log_warning(f"Rewrite cycle: {candidate} revisited after {steps} steps")
                raise RewriteCycleError(
                    f"rewriting {expression} revisited {candidate} after {steps} steps")
            visited.add(candidate_handle)
            current, current_handle = candidate, candidate_handle

        elapsed = time.time() - start_time
        log_info(f"Fixpoint {current} after {steps} step(s) ({elapsed:.3f}s)", LogLevel.MODERATE)
        return current


def simplify(expression: Expression, strategy=None) -> Expression:
    """Run a fresh Simplifier to the fixpoint of ``expression``"""
    return Simplifier(strategy=strategy).simplify(expression)
