"""
elementary.py - 区间初等函数

sin 的包含区间只用区间四则运算迭代得到，每一步都经过定向舍入，
最后把结果裁剪到 sin 的值域 [-1, 1]。
"""

import logging
from typing import Optional

from .config import get_config
from .interval_math import Interval, _cast, _is_nan

logger = logging.getLogger(__name__)


def sin(x: Interval, iterations: Optional[int] = None) -> Interval:
    """
    计算 sin 在区间 x 上的包含区间

    递推: acc = x, x2 = x * x, 对 i = 1 .. iterations-1:
        factor = x2 / (2i * (2i + 1))
        acc = acc * factor + acc   (i 为偶数)
        acc = acc * factor - acc   (i 为奇数)
    迭代次数固定，没有提前收敛判断。奇数 i 共 iterations // 2 步，每步翻转一次
    符号，因此 iterations % 4 为 2 或 3 时结果与 sin 反号。

    Args:
        x: 输入区间
        iterations: 循环上界，默认取全局配置 sin_iterations (500000)

    Returns:
        端点裁剪到 [-1, 1] 的区间
    """
    n = get_config().sin_iterations if iterations is None else iterations
    if n < 1:
        raise ValueError(f"iterations 必须 >= 1，得到 {n}")

    x2 = x * x
    acc = x
    for i in range(1, n):
        divisor = Interval.exact(_cast(2 * i * (2 * i + 1), x.start))
        factor = x2 / divisor
        if i % 2 == 0:
            acc = acc * factor + acc
        else:
            acc = acc * factor - acc

    result = _clamp_unit(acc)
    logger.debug("sin%s: %d 次迭代, 裁剪前 %s, 结果 %s", x, n - 1, acc, result)
    return result


def _clamp_unit(iv: Interval) -> Interval:
    """把两个端点分别裁剪到 [-1, 1]；NaN 下界取 -1，NaN 上界取 1"""
    lo_limit, hi_limit = _cast(-1, iv.start), _cast(1, iv.start)

    start = lo_limit if _is_nan(iv.start) else min(max(iv.start, lo_limit), hi_limit)
    end = hi_limit if _is_nan(iv.end) else min(max(iv.end, lo_limit), hi_limit)
    return Interval(start, end)
