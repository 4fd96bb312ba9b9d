"""
rounding.py - 浮点舍入模式控制

封装 <fenv.h> 的 fegetround / fesetround，提供查询、设置和作用域执行：

- RoundingMode: 四种 IEEE 754 舍入模式
- FenvRoundingController: 通过 ctypes 直接控制硬件舍入寄存器
- SimulatedRoundingController: 无法访问 fenv 时使用，
  将定向舍入的结果向外扩展 1 ulp 以保持包含性
- get_controller / set_controller / use_controller: 当前生效的控制器

舍入寄存器在 Linux / macOS / Windows 上都是线程局部的；
对于非线程局部的平台，可给控制器传入锁以串行化作用域。
"""

import ctypes
import ctypes.util
import enum
import logging
import platform
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Optional, TypeVar

import numpy as np

from .errors import RoundingError, UnknownModeError

logger = logging.getLogger(__name__)

R = TypeVar('R')


class RoundingMode(enum.Enum):
    """IEEE 754 舍入方向"""
    TO_NEAREST = 'to_nearest'
    DOWNWARD = 'downward'        # 向 -inf
    UPWARD = 'upward'            # 向 +inf
    TOWARD_ZERO = 'toward_zero'


# ============================================================================
# 平台舍入代码 (<fenv.h> 中 FE_* 宏的取值)
# ============================================================================

_CODE_TABLES: Dict[str, Dict[RoundingMode, int]] = {
    'x86': {
        RoundingMode.TO_NEAREST: 0x000,
        RoundingMode.DOWNWARD: 0x400,
        RoundingMode.UPWARD: 0x800,
        RoundingMode.TOWARD_ZERO: 0xC00,
    },
    'arm': {
        RoundingMode.TO_NEAREST: 0x000000,
        RoundingMode.UPWARD: 0x400000,
        RoundingMode.DOWNWARD: 0x800000,
        RoundingMode.TOWARD_ZERO: 0xC00000,
    },
    'ppc': {
        RoundingMode.TO_NEAREST: 0,
        RoundingMode.TOWARD_ZERO: 1,
        RoundingMode.UPWARD: 2,
        RoundingMode.DOWNWARD: 3,
    },
    # Windows ucrt 的 FE_* 与 CPU 架构无关
    'ucrt': {
        RoundingMode.TO_NEAREST: 0x000,
        RoundingMode.DOWNWARD: 0x100,
        RoundingMode.UPWARD: 0x200,
        RoundingMode.TOWARD_ZERO: 0x300,
    },
}

_MACHINE_FAMILIES = {
    'x86_64': 'x86', 'amd64': 'x86', 'x86': 'x86', 'i386': 'x86', 'i686': 'x86',
    'aarch64': 'arm', 'arm64': 'arm', 'armv7l': 'arm', 'armv8l': 'arm',
    'ppc64le': 'ppc', 'ppc64': 'ppc', 'powerpc': 'ppc',
}


def platform_codes(machine: Optional[str] = None,
                   system: Optional[str] = None) -> Dict[RoundingMode, int]:
    """当前（或指定）平台的 RoundingMode -> fenv 代码表

    Raises:
        RoundingError: 不认识的 CPU 架构
    """
    system = system or platform.system()
    if system == 'Windows':
        return dict(_CODE_TABLES['ucrt'])

    machine = (machine or platform.machine()).lower()
    family = _MACHINE_FAMILIES.get(machine)
    if family is None:
        raise RoundingError(f"不支持的平台架构: {machine!r}")
    return dict(_CODE_TABLES[family])


def _load_libm():
    """加载提供 fegetround / fesetround 的 C 库"""
    if sys.platform == 'win32':
        candidates = ['ucrtbase']
    else:
        # None 表示进程自身的符号表（CPython 已链接 libm）
        candidates = [ctypes.util.find_library('m'), None]

    for name in candidates:
        try:
            lib = ctypes.CDLL(name)
            getter, setter = lib.fegetround, lib.fesetround
        except (OSError, AttributeError):
            continue
        getter.argtypes = []
        getter.restype = ctypes.c_int
        setter.argtypes = [ctypes.c_int]
        setter.restype = ctypes.c_int
        return lib

    raise RoundingError("无法加载提供 fegetround/fesetround 的 C 数学库")


# ============================================================================
# 控制器
# ============================================================================

class RoundingController:
    """舍入控制器基类

    子类实现 current() / set()；scope() / execute() 在此统一实现，
    任何退出路径（包括 body 抛出异常）都会恢复进入前的舍入模式。

    Args:
        lock: 可选锁。非 None 时整个作用域持有该锁，
            用于舍入状态不是线程局部的平台
    """

    def __init__(self, lock=None):
        self._lock = lock

    @property
    def lock(self):
        return self._lock

    def current(self) -> RoundingMode:
        """查询当前生效的舍入模式"""
        raise NotImplementedError

    def set(self, mode: RoundingMode) -> None:
        """设置舍入模式，失败时抛出 RoundingError"""
        raise NotImplementedError

    @contextmanager
    def scope(self, mode: RoundingMode):
        """在 with 块内切换到 mode，退出时恢复原模式"""
        if self._lock is not None:
            self._lock.acquire()
        try:
            previous = self.current()
            self.set(mode)
            try:
                yield mode
            finally:
                self.set(previous)
        finally:
            if self._lock is not None:
                self._lock.release()

    def execute(self, mode: RoundingMode, body: Callable[[], R]) -> R:
        """在 mode 下执行 body() 并返回其结果"""
        with self.scope(mode):
            return body()

    def adjust(self, value, mode: RoundingMode):
        """对 mode 下算出的区间端点做后处理，默认原样返回"""
        return value

    def round_bound(self, mode: RoundingMode, body: Callable[[], R]) -> R:
        """计算一个区间端点: execute() + adjust()"""
        return self.adjust(self.execute(mode, body), mode)

    def __repr__(self):
        return f"{type(self).__name__}(mode={self.current().name})"


class FenvRoundingController(RoundingController):
    """通过 C 库 fegetround / fesetround 控制硬件舍入寄存器

    Args:
        libm: 提供 fegetround() / fesetround(code) 的对象，默认加载系统 C 库
        codes: RoundingMode -> 平台代码，默认按当前平台选择
        lock: 见 RoundingController
    """

    def __init__(self, libm=None, codes: Optional[Dict[RoundingMode, int]] = None,
                 lock=None):
        super().__init__(lock)
        self._codes = dict(codes) if codes is not None else platform_codes()
        self._modes = {code: mode for mode, code in self._codes.items()}
        self._libm = libm if libm is not None else _load_libm()
        self._fegetround = self._libm.fegetround
        self._fesetround = self._libm.fesetround

    @property
    def codes(self) -> Dict[RoundingMode, int]:
        return dict(self._codes)

    def current(self) -> RoundingMode:
        code = self._fegetround()
        try:
            return self._modes[code]
        except KeyError:
            raise UnknownModeError(code) from None

    def set(self, mode: RoundingMode) -> None:
        code = self._codes[mode]
        status = self._fesetround(code)
        if status != 0:
            raise RoundingError(
                f"fesetround({code:#x}) 失败 ({mode.name})，返回值 {status}")


class SimulatedRoundingController(RoundingController):
    """模拟舍入控制器

    只记录（线程局部的）模式而不改动硬件。定向舍入由 adjust() 补偿：
    DOWNWARD 结果取下一个更小的浮点数，UPWARD 取下一个更大的浮点数，
    单次运算的舍入误差不超过 0.5 ulp，因此外扩 1 ulp 后仍是包含区间。
    """

    def __init__(self, lock=None):
        super().__init__(lock)
        self._state = threading.local()

    def current(self) -> RoundingMode:
        return getattr(self._state, 'mode', RoundingMode.TO_NEAREST)

    def set(self, mode: RoundingMode) -> None:
        if not isinstance(mode, RoundingMode):
            raise RoundingError(f"无效的舍入模式: {mode!r}")
        self._state.mode = mode

    def adjust(self, value, mode: RoundingMode):
        if mode is RoundingMode.DOWNWARD:
            return _next_float(value, -np.inf)
        if mode is RoundingMode.UPWARD:
            return _next_float(value, np.inf)
        return value


def _next_float(value, target):
    """value 朝 target 方向的相邻浮点数；非浮点类型（int、Fraction）是精确的，原样返回"""
    if isinstance(value, np.floating):
        return np.nextafter(value, value.dtype.type(target))
    if isinstance(value, float):
        return float(np.nextafter(value, target))
    return value


# ============================================================================
# 当前生效的控制器
# ============================================================================

_ACTIVE_CONTROLLER: Optional[RoundingController] = None


def create_controller(backend: str = 'auto', lock=None) -> RoundingController:
    """按名称创建控制器

    Args:
        backend: 'fenv' / 'simulated' / 'auto'（优先 fenv，不可用时退回模拟）
        lock: 作用域锁（可选）
    """
    if backend == 'fenv':
        return FenvRoundingController(lock=lock)
    if backend == 'simulated':
        return SimulatedRoundingController(lock=lock)
    if backend != 'auto':
        raise ValueError(f"未知的舍入后端: {backend!r}")

    try:
        controller = FenvRoundingController(lock=lock)
    except RoundingError as exc:
        logger.warning("硬件舍入控制不可用 (%s)，改用模拟舍入控制器", exc)
        return SimulatedRoundingController(lock=lock)
    logger.debug("使用硬件舍入控制器，平台代码 %s",
                 {m.name: hex(c) for m, c in controller.codes.items()})
    return controller


def get_controller() -> RoundingController:
    """当前生效的控制器；首次调用时按全局配置创建"""
    global _ACTIVE_CONTROLLER
    if _ACTIVE_CONTROLLER is None:
        from .config import get_config
        _ACTIVE_CONTROLLER = get_config().create_controller()
    return _ACTIVE_CONTROLLER


def set_controller(controller: Optional[RoundingController]) -> Optional[RoundingController]:
    """替换当前控制器，返回之前的控制器（None 表示下次按配置重新创建）"""
    global _ACTIVE_CONTROLLER
    previous = _ACTIVE_CONTROLLER
    _ACTIVE_CONTROLLER = controller
    return previous


@contextmanager
def use_controller(controller: RoundingController):
    """在 with 块内使用指定控制器"""
    previous = set_controller(controller)
    try:
        yield controller
    finally:
        set_controller(previous)
