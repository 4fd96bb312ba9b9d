#!/usr/bin/env python
"""
examples/sine_enclosure.py - sin 包含区间示例

对 [x - ε, x + ε] 计算 sin 的包含区间，与 math.sin(x) 对比。

用法:
    python examples/sine_enclosure.py
    python examples/sine_enclosure.py --x 0.5 --epsilon 0.01 --iterations 10000
"""

import argparse
import logging
import math
import os
import sys
import time

# 添加 src/ 目录到路径，使 interval_enclosure 包可导入
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_project_root, 'src'))

from interval_enclosure import Interval, configure

LOG_FMT = "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s"
logger = logging.getLogger("sine_enclosure")


def main():
    parser = argparse.ArgumentParser(description="sin 包含区间示例")
    parser.add_argument("--x", type=float, default=0.785,
                        help="区间中心 (默认: 0.785)")
    parser.add_argument("--epsilon", type=float, default=0.02,
                        help="区间半宽 (默认: 0.02)")
    parser.add_argument("--iterations", type=int, default=500_000,
                        help="sin 递推循环上界 (默认: 500000)")
    parser.add_argument("--backend", choices=["auto", "fenv", "simulated"],
                        default="auto", help="舍入控制后端 (默认: auto)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="输出调试日志")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format=LOG_FMT, datefmt="%H:%M:%S")
    configure(rounding_backend=args.backend, sin_iterations=args.iterations)

    interval = Interval.with_epsilon(args.x, args.epsilon)
    t0 = time.time()
    isin = interval.sin()
    logger.info("sin%s 计算耗时 %.2f 秒", interval, time.time() - t0)

    print(math.sin(args.x))
    print(f"{isin} {isin.width()}")


if __name__ == "__main__":
    main()
