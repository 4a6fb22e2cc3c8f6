"""Diagnostics Context Management.

Context variable that lets callers collect the non-fatal findings produced
while records are parsed (required fields missing under the warn policy)
without threading a collector through every ``from_tree`` call.

Architecture:
    - Uses contextvars, so concurrent parses in separate contexts stay isolated
    - Domain code reports through ``record_diagnostic_if_context``; when no
      context is active the call does nothing
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

_diagnostics_context: ContextVar[Optional[list]] = ContextVar(
    'diagnostics_context',
    default=None
)


def get_diagnostics() -> Optional[list]:
    """Return the active diagnostics list, or None outside a context."""
    return _diagnostics_context.get()


@contextmanager
def diagnostics_context() -> Iterator[list]:
    """Collect diagnostics reported inside the ``with`` block.

    Yields:
        list: Diagnostics reported so far; filled in as parsing proceeds

    Example:
        ```python
        with diagnostics_context() as diagnostics:
            claim = Claim.from_tree(tree)
        for violation in diagnostics:
            print(violation)
        ```
    """
    collected: list = []
    token = _diagnostics_context.set(collected)
    try:
        yield collected
    finally:
        _diagnostics_context.reset(token)


def record_diagnostic_if_context(diagnostic: Any) -> None:
    """Append ``diagnostic`` to the active context, if there is one."""
    collected = _diagnostics_context.get()
    if collected is not None:
        collected.append(diagnostic)
