"""Tests for the comparison Context system."""

import pytest

from qlmath.linalg import Matrix, Real
from qlmath.linalg.context import (
    DEFAULT_FLAGS,
    Context,
    ContextFlags,
    get_context,
    get_current_context,
    reset_contexts,
    set_current_context,
)


class TestContextFlags:
    """Test the flag store."""

    def test_defaults(self):
        """Test new flags start from the library defaults."""
        flags = ContextFlags()
        for name, value in DEFAULT_FLAGS.items():
            assert flags[name] == value

    def test_set_and_get(self):
        """Test setting flags and reading them back."""
        flags = ContextFlags()
        flags.set(tolerance=1e-3)
        assert flags.get('tolerance') == 1e-3
        assert flags.get('missing', 'fallback') == 'fallback'
        assert 'zeroLevel' in flags

    def test_copy_is_independent(self):
        """Test copies do not share state."""
        flags = ContextFlags()
        copied = flags.copy()
        copied.set(tolerance=0.5)
        assert flags.get('tolerance') == DEFAULT_FLAGS['tolerance']


class TestNamedContexts:
    """Test the built-in contexts."""

    def test_linear_algebra_is_default(self):
        """Test the initial context is LinearAlgebra with absolute tolerance."""
        ctx = get_current_context()
        assert ctx.name == 'LinearAlgebra'
        assert ctx.tolerance == 1e-6
        assert ctx.tol_type == 'absolute'
        assert ctx.zero_level == 1e-10

    def test_numeric_context_is_relative(self):
        """Test the Numeric context uses relative tolerance 0.001."""
        ctx = Context('Numeric')
        assert ctx.tolerance == 0.001
        assert ctx.tol_type == 'relative'

    def test_strict_context(self):
        """Test the Strict context tightens every threshold."""
        ctx = Context('Strict')
        assert ctx.tolerance == 1e-12
        assert ctx.flags.get('symmetryTolerance') == 1e-12

    def test_get_context_switches_current(self):
        """Test get_context(name) installs that context."""
        strict = get_context('Strict')
        assert get_current_context() is strict
        assert get_context('Strict') is strict

    def test_reset_restores_defaults(self):
        """Test reset_contexts drops modified contexts."""
        get_context().flags.set(tolerance=0.5)
        reset_contexts()
        assert get_current_context().tolerance == 1e-6

    def test_copy_with_new_name(self):
        """Test copying a context keeps flags and allows renaming."""
        ctx = Context('Numeric')
        copied = ctx.copy('Loose')
        assert copied.name == 'Loose'
        assert copied.tolerance == 0.001
        assert copied is not ctx
        assert copied != ctx

    def test_repr(self):
        """Test the context representation."""
        assert repr(Context('Strict')) == "Context('Strict')"


class TestContextAffectsComparison:
    """Test that equality follows the current context."""

    def test_relative_context_accepts_scaled_difference(self):
        """Test the Numeric context compares relatively."""
        assert Real(1000) != Real(1000.5)
        get_context('Numeric')
        assert Real(1000) == Real(1000.5)

    def test_custom_context_tolerance(self):
        """Test a user context with a loose tolerance."""
        ctx = Context('Loose')
        ctx.flags.set(tolerance=0.1)
        set_current_context(ctx)
        assert Matrix([[1, 2]]) == Matrix([[1.05, 2.05]])

    def test_explicit_tolerance_overrides_context(self):
        """Test compare() with explicit settings ignores the context."""
        get_context('Numeric')
        assert not Real(1000).compare(Real(1000.5), tolerance=1e-6, mode='absolute')

    @pytest.mark.parametrize("name", ["LinearAlgebra", "Numeric", "Strict"])
    def test_zero_level_is_positive(self, name):
        """Test every named context has a positive zero level."""
        assert get_context(name).zero_level > 0
