"""
errors.py - 区间算术异常

所有异常均继承 IntervalError，同时继承对应的内置异常类型，
便于调用方按 ValueError / ZeroDivisionError 等常规方式捕获。
"""


class IntervalError(Exception):
    """区间算术异常基类"""


class InvalidRangeError(IntervalError, ValueError):
    """构造区间时 start > end"""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"{start!r} must be no greater than {end!r}")


class RoundingError(IntervalError, RuntimeError):
    """平台舍入模式设置失败，或当前平台不支持舍入控制"""


class UnknownModeError(RoundingError):
    """平台返回的舍入模式代码不属于四种已知模式"""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"未知的舍入模式代码: {code:#x}")


class DivisionByZeroError(IntervalError, ZeroDivisionError):
    """除数区间包含 0 (仅在 zero_division='raise' 时抛出)"""
