"""
config.py - 区间算术全局配置

IntervalConfig 控制舍入后端、sin 迭代上界和除零策略，
支持与字典 / JSON 文件互转。configure() 安装新配置并同步替换
当前的舍入控制器。
"""

import json
import logging
import threading
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from . import rounding

logger = logging.getLogger(__name__)

ROUNDING_BACKENDS = ('auto', 'fenv', 'simulated')
ZERO_DIVISION_POLICIES = ('propagate', 'raise')


@dataclass
class IntervalConfig:
    """区间算术参数配置

    Attributes:
        rounding_backend: 舍入控制后端 ('auto' / 'fenv' / 'simulated')
        sin_iterations: sin 递推的循环上界（i 取 1 .. sin_iterations-1）
        zero_division: 除数区间含 0 时的处理
            ('propagate': 按 IEEE 产生 inf/nan, 'raise': 抛出 DivisionByZeroError)
        serialize_scopes: 是否用锁串行化所有舍入作用域
    """
    rounding_backend: str = 'auto'
    sin_iterations: int = 500_000
    zero_division: str = 'propagate'
    serialize_scopes: bool = False

    def __post_init__(self) -> None:
        if self.rounding_backend not in ROUNDING_BACKENDS:
            raise ValueError(
                f"rounding_backend 必须是 {ROUNDING_BACKENDS} 之一，"
                f"得到 {self.rounding_backend!r}")
        if self.zero_division not in ZERO_DIVISION_POLICIES:
            raise ValueError(
                f"zero_division 必须是 {ZERO_DIVISION_POLICIES} 之一，"
                f"得到 {self.zero_division!r}")
        if isinstance(self.sin_iterations, bool) or not isinstance(self.sin_iterations, int) \
                or self.sin_iterations < 1:
            raise ValueError(f"sin_iterations 必须是正整数，得到 {self.sin_iterations!r}")

    def create_controller(self) -> 'rounding.RoundingController':
        """按本配置创建舍入控制器"""
        lock = threading.RLock() if self.serialize_scopes else None
        return rounding.create_controller(self.rounding_backend, lock=lock)

    # ── JSON 序列化 ──

    def to_dict(self) -> Dict[str, Any]:
        """转为字典"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, filepath) -> str:
        """保存到 JSON 文件，返回文件路径字符串"""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IntervalConfig':
        """从字典创建（忽略未知字段，缺失字段用默认值）"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls, filepath) -> 'IntervalConfig':
        """从 JSON 文件加载"""
        with open(Path(filepath), 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))


_CONFIG = IntervalConfig()


def get_config() -> IntervalConfig:
    """当前全局配置"""
    return _CONFIG


def configure(config: Optional[IntervalConfig] = None, **overrides) -> IntervalConfig:
    """安装全局配置并替换舍入控制器

    Args:
        config: 新配置，None 表示在当前配置基础上修改
        **overrides: 覆盖的字段，例如 configure(sin_iterations=1000)

    Returns:
        生效的配置
    """
    global _CONFIG
    new_config = replace(config if config is not None else _CONFIG, **overrides)
    controller = new_config.create_controller()
    _CONFIG = new_config
    rounding.set_controller(controller)
    logger.debug("区间算术配置: %s, 控制器 %s", new_config.to_dict(),
                 type(controller).__name__)
    return new_config


def reset_config() -> IntervalConfig:
    """恢复默认配置"""
    return configure(IntervalConfig())
