#!/usr/bin/env python
"""
examples/rounding_modes.py - 舍入模式效果演示

在四种舍入模式下分别计算
    z1 = (1 - 1e-20) - 1
    z2 = (1e-20 - 1) + 1
1e-20 远小于 1 的 ulp，就近舍入时两者都为 0，定向舍入时会得到 ±ulp。
simulated 后端不改动硬件舍入，四种模式输出相同。
分别用 float32 (numpy) 和 float64 演示。

用法:
    python examples/rounding_modes.py
    python examples/rounding_modes.py --backend simulated
"""

import argparse
import logging
import os
import sys

import numpy as np

# 添加 src/ 目录到路径，使 interval_enclosure 包可导入
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_project_root, 'src'))

from interval_enclosure import RoundingMode, create_controller

LOG_FMT = "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s"
logger = logging.getLogger("rounding_modes")

MODE_LABELS = [
    (RoundingMode.TO_NEAREST, "nearest"),
    (RoundingMode.DOWNWARD, "downward"),
    (RoundingMode.UPWARD, "upward"),
    (RoundingMode.TOWARD_ZERO, "toward zero"),
]


def calc(dtype):
    """在当前舍入模式下计算 z1 / z2"""
    x = dtype(1.0)
    y = dtype(1.0e-20)
    z1 = x - y
    z2 = y - x
    z1 = z1 - x
    z2 = z2 + x
    return z1, z2


def main():
    parser = argparse.ArgumentParser(description="舍入模式效果演示")
    parser.add_argument("--backend", choices=["auto", "fenv", "simulated"],
                        default="auto", help="舍入控制后端 (默认: auto)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="输出调试日志")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format=LOG_FMT, datefmt="%H:%M:%S")
    controller = create_controller(args.backend)
    logger.info("舍入控制器: %s", type(controller).__name__)

    for label, dtype in (("f32", np.float32), ("f64", float)):
        print(label)
        for mode, name in MODE_LABELS:
            # 格式化放在作用域外，浮点转字符串依赖就近舍入
            z1, z2 = controller.execute(mode, lambda: calc(dtype))
            print(f"{name:12}, z1 = {float(z1):17.10e}, z2 = {float(z2):17.10e}")
        print()


if __name__ == "__main__":
    main()
