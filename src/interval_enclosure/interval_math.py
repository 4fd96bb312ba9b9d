"""
interval_math.py - 定向舍入区间算术

区间 [start, end] 保证包含真实值：每个端点都在对应方向的舍入模式下计算
（下界向 -inf，上界向 +inf），舍入误差只会让区间变宽，不会漏掉真值。

端点类型可以是 float、int、Fraction 或 numpy 浮点标量。
"""

import enum
import math
import numbers
from typing import Iterator, Optional

from .config import get_config
from .errors import DivisionByZeroError, InvalidRangeError
from .rounding import RoundingMode, get_controller

DOWNWARD = RoundingMode.DOWNWARD
UPWARD = RoundingMode.UPWARD


class Ordering(enum.IntEnum):
    """区间与标量的比较结果"""
    LESS = -1
    EQUAL = 0
    GREATER = 1


# ============================================================================
# 区间类
# ============================================================================

class Interval:
    """
    闭区间 [start, end]，start <= end

    与标量的比较基于包含关系：

    - ``Interval.with_range(1., 2.) == 1.5``（区间包含 1.5）
    - ``Interval.with_range(1., 2.) < 3.`` / ``> 0.5``
    - ``<=`` / ``>=`` 在标量落在区间内时也成立

    因此 ``==`` 不满足传递性，这在区间算术中是预期行为。
    区间之间的 ``==`` 比较两个端点是否完全相同；区间之间没有大小关系。
    """

    __slots__ = ('_start', '_end')

    # 让 numpy 标量在运算和比较时交给 Interval 的反射方法处理
    __array_ufunc__ = None

    def __init__(self, start, end):
        if start > end:
            raise InvalidRangeError(start, end)
        self._start = start
        self._end = end

    # ── 构造 ──

    @classmethod
    def with_range(cls, start, end) -> 'Interval':
        """由端点创建区间，start > end 时抛出 InvalidRangeError"""
        return cls(start, end)

    @classmethod
    def with_epsilon(cls, center, epsilon) -> 'Interval':
        """由中心和半宽 ε 创建区间 [center - ε, center + ε]"""
        return cls(center - epsilon, center + epsilon)

    @classmethod
    def exact(cls, value) -> 'Interval':
        """零宽区间 [value, value]"""
        return cls(value, value)

    @classmethod
    def zero(cls) -> 'Interval':
        return cls.exact(0.0)

    @classmethod
    def one(cls) -> 'Interval':
        return cls.exact(1.0)

    # ── 查询 ──

    @property
    def start(self):
        return self._start

    @property
    def end(self):
        return self._end

    def is_zero(self) -> bool:
        return self._start == 0 and self._end == 0

    def contains(self, value) -> bool:
        """value 是否在区间内（两端闭）"""
        return self._start <= value <= self._end

    def width(self):
        return self._end - self._start

    def center(self):
        """区间中点（普通舍入，仅用于查询）"""
        return (self._start + self._end) / _cast(2, self._start)

    def epsilon(self):
        """ε：区间半宽"""
        return self.width() / _cast(2, self._start)

    def intersection(self, other: 'Interval') -> Optional['Interval']:
        """
        区间交集

        Returns:
            无重叠时返回 None，否则返回交集区间
        """
        low = max(self._start, other._start)
        high = min(self._end, other._end)
        if low > high:
            return None
        return Interval(low, high)

    def compare_to_scalar(self, value) -> Optional[Ordering]:
        """
        区间相对标量的位置

        Returns:
            GREATER: value < start
            LESS: value > end
            EQUAL: value 在区间内
            None: 无法比较（value 为 NaN）
        """
        if value < self._start:
            return Ordering.GREATER
        if value > self._end:
            return Ordering.LESS
        if self.contains(value):
            return Ordering.EQUAL
        return None

    def sin(self, iterations: Optional[int] = None) -> 'Interval':
        """sin 的包含区间，见 elementary.sin"""
        from .elementary import sin
        return sin(self, iterations)

    # ── 比较 ──

    def __eq__(self, other):
        if isinstance(other, Interval):
            return self._start == other._start and self._end == other._end
        if isinstance(other, numbers.Real):
            return self.contains(other)
        return NotImplemented

    # 与标量相等表示包含，无法给出一致的哈希
    __hash__ = None

    def __lt__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.compare_to_scalar(other) is Ordering.LESS

    def __le__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.compare_to_scalar(other) in (Ordering.LESS, Ordering.EQUAL)

    def __gt__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.compare_to_scalar(other) is Ordering.GREATER

    def __ge__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.compare_to_scalar(other) in (Ordering.GREATER, Ordering.EQUAL)

    # ── 算术 ──

    def __add__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        ctrl = get_controller()
        a, b = self, other
        start = ctrl.round_bound(DOWNWARD, lambda: a._start + b._start)
        end = ctrl.round_bound(UPWARD, lambda: a._end + b._end)
        return Interval(start, end)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        ctrl = get_controller()
        a, b = self, other
        start = ctrl.round_bound(DOWNWARD, lambda: a._start - b._end)
        end = ctrl.round_bound(UPWARD, lambda: a._end - b._start)
        return Interval(start, end)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.__sub__(self)

    def __mul__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        # 操作数符号不定，需考虑四个端点组合
        ctrl = get_controller()
        a, b, c, d = self._start, self._end, other._start, other._end
        start = ctrl.round_bound(DOWNWARD, lambda: _lowest(a * c, a * d, b * c, b * d))
        end = ctrl.round_bound(UPWARD, lambda: _highest(a * c, a * d, b * c, b * d))
        return Interval(start, end)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if get_config().zero_division == 'raise' and other.contains(0):
            raise DivisionByZeroError(f"除数区间 {other} 包含 0")
        ctrl = get_controller()
        a, b, c, d = self._start, self._end, other._start, other._end
        start = ctrl.round_bound(DOWNWARD, lambda: _lowest(
            _divide(a, c), _divide(a, d), _divide(b, c), _divide(b, d)))
        end = ctrl.round_bound(UPWARD, lambda: _highest(
            _divide(a, c), _divide(a, d), _divide(b, c), _divide(b, d)))
        return Interval(start, end)

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.__truediv__(self)

    def __neg__(self):
        return Interval(-self._end, -self._start)

    def __pos__(self):
        return self

    # ── 其他 ──

    def __iter__(self) -> Iterator:
        yield self._start
        yield self._end

    def __str__(self):
        return f"[{self._start}, {self._end}]"

    def __repr__(self):
        return f"Interval({self._start!r}, {self._end!r})"


# ==================== 辅助函数 ====================

def _coerce(value) -> Optional[Interval]:
    """把标量提升为零宽区间；不支持的类型返回 None"""
    if isinstance(value, Interval):
        return value
    if isinstance(value, numbers.Real):
        return Interval.exact(value)
    return None


def _cast(n: int, like):
    """把小整数 n 转为与 like 相同的数值类型"""
    return type(like)(n)


def _is_nan(x) -> bool:
    return x != x


def _lowest(*values):
    """最小值；任一值为 NaN 时返回 NaN"""
    result = values[0]
    for v in values:
        if _is_nan(v):
            return v
        if v < result:
            result = v
    return result


def _highest(*values):
    """最大值；任一值为 NaN 时返回 NaN"""
    result = values[0]
    for v in values:
        if _is_nan(v):
            return v
        if v > result:
            result = v
    return result


def _divide(x, y):
    """IEEE 语义的除法：x/0 -> ±inf，0/0 -> nan（Python float 除零会抛异常）"""
    try:
        return x / y
    except ZeroDivisionError:
        if _is_nan(x) or x == 0:
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
