"""
test_interval_math.py — Unit tests for interval_math.py

Covers:
    - Interval construction, inspection (width, center, epsilon), display
    - Containment-based equality and ordering against scalars
    - Intersection
    - Directed-rounding arithmetic (add, sub, mul, div, neg, scalar operands)
    - Division by zero-containing intervals
    - Edge cases (degenerate intervals, NaN, numpy / Fraction bounds)
"""

import math
from fractions import Fraction

import numpy as np
import pytest

from interval_enclosure import (
    DivisionByZeroError,
    Interval,
    InvalidRangeError,
    Ordering,
    configure,
)


# =========================================================================
# Construction & inspection
# =========================================================================

class TestInterval:

    def test_creation(self):
        iv = Interval.with_range(1., 3.)
        assert iv.start == 1.0
        assert iv.end == 3.0

    def test_invalid_range_raises(self):
        with pytest.raises(InvalidRangeError, match="must be no greater than"):
            Interval.with_range(2, 1)

    def test_invalid_range_is_value_error(self):
        with pytest.raises(ValueError):
            Interval.with_range(2., 1.)

    def test_with_epsilon(self):
        assert Interval.with_epsilon(1.5, 0.5) == Interval.with_range(1., 2.)

    def test_with_negative_epsilon_raises(self):
        with pytest.raises(InvalidRangeError):
            Interval.with_epsilon(1.0, -0.5)

    def test_exact(self):
        iv = Interval.exact(2.5)
        assert iv.start == iv.end == 2.5
        assert iv.width() == 0

    def test_zero_one(self):
        assert Interval.zero().is_zero()
        assert not Interval.one().is_zero()
        assert Interval.one() == Interval.exact(1.0)

    def test_width_center_epsilon(self, pair):
        a, _ = pair
        assert a.width() == 1.0
        assert a.center() == 1.5
        assert a.epsilon() == 0.5

    def test_center_of_int_interval(self):
        assert Interval.with_range(1, 2).center() == 1.5

    def test_contains(self, pair):
        a, _ = pair
        assert a.contains(1.5)
        assert a.contains(1.0)
        assert a.contains(2.0)
        assert not a.contains(2.1)

    def test_immutable(self, pair):
        a, _ = pair
        with pytest.raises(AttributeError):
            a.start = 0.0

    def test_unhashable(self, pair):
        a, _ = pair
        with pytest.raises(TypeError):
            hash(a)

    def test_display(self, pair):
        a, _ = pair
        assert str(a) == "[1.0, 2.0]"
        assert f"{Interval.with_range(1, 2)}" == "[1, 2]"

    def test_repr(self, pair):
        a, _ = pair
        assert repr(a) == "Interval(1.0, 2.0)"

    def test_iter(self, pair):
        lo, hi = pair[1]
        assert (lo, hi) == (3.0, 4.0)


# =========================================================================
# Intersection
# =========================================================================

class TestIntersection:

    def test_overlap(self):
        a = Interval.with_range(1., 2.)
        b = Interval.with_range(1.5, 2.5)
        assert a.intersection(b) == Interval.with_range(1.5, 2.)

    def test_disjoint(self, pair):
        a, b = pair
        assert a.intersection(b) is None

    def test_touching(self):
        a = Interval.with_range(1., 2.)
        b = Interval.with_range(2., 3.)
        assert a.intersection(b) == Interval.exact(2.)

    def test_commutative(self):
        """a ∩ b == b ∩ a over a grid of intervals."""
        points = np.linspace(-2.0, 2.0, 7)
        intervals = [Interval.with_range(lo, hi)
                     for lo in points for hi in points if lo <= hi]
        for a in intervals:
            for b in intervals:
                assert a.intersection(b) == b.intersection(a), f"{a} ∩ {b}"


# =========================================================================
# Ordering & equality against scalars
# =========================================================================

class TestOrdering:

    def test_equality_is_containment(self, pair):
        a, _ = pair
        assert a == 1.5
        assert a != 2.1
        assert 1.5 == a

    def test_equality_matches_contains(self):
        iv = Interval.with_range(-1.0, 1.0)
        for v in np.linspace(-2.0, 2.0, 41):
            assert (iv == v) == iv.contains(v), f"v={v}"

    def test_ordering(self, pair):
        a, _ = pair
        assert a > 0.
        assert a < 3.
        assert a <= 1.5
        assert a >= 1.5
        assert not a < 1.5
        assert not a > 1.5

    def test_reflected_ordering(self, pair):
        a, _ = pair
        assert 3. > a
        assert 0.5 < a

    def test_compare_to_scalar(self, pair):
        a, _ = pair
        assert a.compare_to_scalar(0.5) is Ordering.GREATER
        assert a.compare_to_scalar(3.0) is Ordering.LESS
        assert a.compare_to_scalar(1.0) is Ordering.EQUAL
        assert a.compare_to_scalar(2.0) is Ordering.EQUAL

    def test_nan_is_unordered(self, pair):
        a, _ = pair
        assert a.compare_to_scalar(math.nan) is None
        assert a != math.nan
        assert not a < math.nan
        assert not a >= math.nan

    def test_interval_vs_interval_equality(self, pair):
        a, b = pair
        assert a == Interval.with_range(1., 2.)
        assert a != b

    def test_interval_vs_interval_ordering_undefined(self, pair):
        a, b = pair
        with pytest.raises(TypeError):
            a < b


# =========================================================================
# Arithmetic (hardware directed rounding)
# =========================================================================

@pytest.mark.usefixtures("fenv_controller")
class TestArithmetic:

    def test_add(self, pair):
        a, b = pair
        assert a + b == Interval.with_range(4., 6.)

    def test_sub(self, pair):
        a, b = pair
        assert b - a == Interval.with_range(1., 3.)
        assert a - b == Interval.with_range(-3., -1.)

    def test_sub_self_is_not_zero(self, pair):
        """x - x encloses [−w, w], not [0, 0]."""
        a, _ = pair
        assert a - a == Interval.with_range(-1., 1.)

    def test_mul(self, pair):
        a, b = pair
        assert a * b == Interval.with_range(3., 8.)

    def test_mul_mixed_sign(self):
        a = Interval.with_range(-1., 2.)
        b = Interval.with_range(-3., 4.)
        assert a * b == Interval.with_range(-6., 8.)

    def test_div(self, pair):
        a, b = pair
        assert b / a == Interval.with_range(1.5, 4.)

    def test_neg(self, pair):
        a, _ = pair
        assert -a == Interval.with_range(-2., -1.)

    def test_scalar_operands(self):
        iv = Interval.with_range(1., 3.)
        assert iv * 2 == Interval.with_range(2., 6.)
        assert 2 * iv == Interval.with_range(2., 6.)
        assert 1 + iv == Interval.with_range(2., 4.)
        assert 5 - iv == Interval.with_range(2., 4.)
        assert 3 / iv == Interval.with_range(1., 3.)

    def test_numpy_scalar_on_left(self):
        iv = Interval.with_range(1., 3.)
        result = np.float64(2.0) * iv
        assert isinstance(result, Interval)
        assert result == Interval.with_range(2., 6.)

    def test_unsupported_operand(self, pair):
        a, _ = pair
        with pytest.raises(TypeError):
            a + "1"

    def test_inexact_sum_is_widened(self):
        s = Interval.exact(0.1) + Interval.exact(0.2)
        assert s.start < s.end
        assert s.contains(Fraction(0.1) + Fraction(0.2))
        assert s.end - s.start == np.spacing(s.start)

    def test_inexact_quotient_encloses_true_value(self):
        q = Interval.exact(1.0) / Interval.exact(3.0)
        assert q.start < q.end
        assert q.contains(Fraction(1, 3))

    def test_products_enclose_samples(self):
        a = Interval.with_range(-1.3, 2.7)
        b = Interval.with_range(-0.6, 4.1)
        prod = a * b
        for x in np.linspace(a.start, a.end, 25):
            for y in np.linspace(b.start, b.end, 25):
                assert prod.contains(x * y), f"{x}*{y} not in {prod}"

    def test_quotients_enclose_samples(self):
        a = Interval.with_range(-1.3, 2.7)
        b = Interval.with_range(0.7, 4.1)
        quot = a / b
        for x in np.linspace(a.start, a.end, 25):
            for y in np.linspace(b.start, b.end, 25):
                assert quot.contains(x / y), f"{x}/{y} not in {quot}"

    def test_float32_bounds_keep_dtype(self):
        a = Interval.with_range(np.float32(1), np.float32(2))
        b = Interval.with_range(np.float32(3), np.float32(4))
        c = a * b
        assert isinstance(c.start, np.float32)
        assert c == Interval.with_range(np.float32(3), np.float32(8))


# =========================================================================
# Division by zero-containing intervals
# =========================================================================

@pytest.mark.usefixtures("fenv_controller")
class TestDivisionByZero:

    def test_propagates_infinity(self):
        q = Interval.with_range(1., 2.) / Interval.with_range(0., 1.)
        assert q.start == 1.0
        assert q.end == math.inf

    def test_zero_over_zero_is_nan(self):
        q = Interval.with_range(0., 1.) / Interval.with_range(0., 1.)
        assert math.isnan(q.start)
        assert math.isnan(q.end)

    def test_raise_policy(self, pair):
        configure(zero_division='raise')
        a, _ = pair
        with pytest.raises(DivisionByZeroError):
            a / Interval.with_range(-1., 1.)

    def test_raise_policy_is_zero_division_error(self, pair):
        configure(zero_division='raise')
        a, _ = pair
        with pytest.raises(ZeroDivisionError):
            a / 0

    def test_raise_policy_allows_nonzero_divisor(self, pair):
        configure(zero_division='raise')
        a, b = pair
        assert (b / a).contains(2.0)


# =========================================================================
# Simulated rounding
# =========================================================================

@pytest.mark.usefixtures("simulated_controller")
class TestSimulatedArithmetic:

    def test_add_widens_by_one_ulp(self, pair):
        a, b = pair
        s = a + b
        assert s.start == np.nextafter(4.0, -np.inf)
        assert s.end == np.nextafter(6.0, np.inf)
        assert isinstance(s.start, float)

    def test_mul_still_encloses(self, pair):
        a, b = pair
        p = a * b
        assert p.contains(3.0) and p.contains(8.0)
        assert p.width() == pytest.approx(5.0)

    def test_fraction_bounds_are_exact(self):
        a = Interval.with_range(Fraction(1, 3), Fraction(1, 2))
        assert a * Fraction(6) == Interval.with_range(Fraction(2), Fraction(3))
        assert a - a == Interval.with_range(Fraction(-1, 6), Fraction(1, 6))
