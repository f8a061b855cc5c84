"""
Context system for qlmath values.

The Context holds the flags that control fuzzy comparison and the zero
thresholds used by the matrix predicates and decompositions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr

logger = logging.getLogger(__name__)


DEFAULT_FLAGS: Dict[str, Any] = {
    # Comparison tolerances
    'tolerance': 1e-6,
    'tolType': 'absolute',
    # Anything smaller in magnitude counts as zero (pivots, predicates)
    'zeroLevel': 1e-10,
    'symmetryTolerance': 1e-6,
}


class ContextFlags(BaseModel):
    """
    Manages context flags/options.

    Flags control comparison tolerances and zero thresholds.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)
    _flags: Dict[str, Any] = PrivateAttr(default_factory=dict)

    def __init__(self, **kwargs):
        super().__init__()
        self._flags = dict(DEFAULT_FLAGS)
        self._flags.update(kwargs)

    def set(self, **kwargs):
        """Set flag values."""
        self._flags.update(kwargs)

    def get(self, name: str, default: Any = None) -> Any:
        """Get flag value with optional default."""
        return self._flags.get(name, default)

    def copy(self):
        """Create a copy of this flags object."""
        new_flags = ContextFlags()
        new_flags._flags = self._flags.copy()
        return new_flags

    def __getitem__(self, name: str) -> Any:
        return self._flags[name]

    def __contains__(self, name: str) -> bool:
        return name in self._flags


class Context(BaseModel):
    """
    Named collection of comparison settings.

    Known names:
    - LinearAlgebra: absolute tolerance 1e-6 (default)
    - Numeric: relative tolerance 0.001
    - Strict: absolute tolerance 1e-12
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    name: str = "LinearAlgebra"
    flags: ContextFlags | None = None

    def __init__(self, name: str = 'LinearAlgebra', **kwargs):
        if 'flags' not in kwargs:
            kwargs['flags'] = ContextFlags()

        kwargs['name'] = name
        super().__init__(**kwargs)

        if name == 'Numeric':
            self._init_numeric()
        elif name == 'Strict':
            self._init_strict()

    def _init_numeric(self):
        """Relative comparison, as used for general numeric answers."""
        self.flags.set(tolerance=0.001, tolType='relative', zeroLevel=1e-14)

    def _init_strict(self):
        self.flags.set(tolerance=1e-12, tolType='absolute', zeroLevel=1e-14,
                       symmetryTolerance=1e-12)

    @property
    def tolerance(self) -> float:
        return self.flags.get('tolerance')

    @property
    def tol_type(self) -> str:
        return self.flags.get('tolType')

    @property
    def zero_level(self) -> float:
        return self.flags.get('zeroLevel')

    def copy(self, name: Optional[str] = None) -> 'Context':
        """
        Create a copy of this context.

        Args:
            name: Optional new name for the copied context

        Returns:
            New Context instance with copied settings
        """
        return Context.model_construct(
            name=name if name is not None else self.name,
            flags=self.flags.copy() if self.flags else ContextFlags(),
        )

    def __eq__(self, other):
        """Check if two contexts are the same instance."""
        if not isinstance(other, Context):
            return False
        return self is other

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return f"Context('{self.name}')"


# Global context registry (singleton pattern for named contexts)
_contexts: Dict[str, Context] = {}
_current_context: Optional[Context] = None


def get_context(name: Optional[str] = None) -> Context:
    """
    Get or set the current context.

    Args:
        name: Context name to switch to (None = get current)

    Returns:
        Current context

    Examples:
        >>> ctx = get_context('Strict')   # Switch to Strict context
        >>> ctx = get_context()           # Get current context
        >>> ctx.flags.set(tolerance=1e-8)
    """
    global _current_context

    if name is None:
        if _current_context is None:
            _current_context = _create_context('LinearAlgebra')
        return _current_context

    if name not in _contexts:
        _contexts[name] = _create_context(name)

    _current_context = _contexts[name]
    logger.debug(f"Switched to context {name}")
    return _current_context


def set_current_context(context: Context) -> Context:
    """Install an existing Context object as the current context."""
    global _current_context
    _contexts[context.name] = context
    _current_context = context
    return context


def reset_contexts() -> None:
    """Drop all cached contexts; the next lookup recreates the defaults."""
    global _current_context
    _contexts.clear()
    _current_context = None


def _create_context(name: str) -> Context:
    ctx = Context(name)
    _contexts[name] = ctx
    return ctx


def get_current_context() -> Context:
    """
    Get the current context.

    Returns:
        Current context (creates LinearAlgebra if none exists)
    """
    return get_context()
