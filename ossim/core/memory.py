# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 内存管理模块
采用可变分区方式管理一段线性地址空间，支持首次适应与最佳适应算法

分区表按地址有序，相邻分区首尾相接，覆盖 [0, total_size)。
分配时若分区恰好等于请求大小则整块占用，否则拆分为已分配前缀与空闲剩余。
本模块不提供释放操作，分区只会越拆越多，不会合并。
"""

import threading
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..config import MEMORY_SIZE, MAX_MEMORY_BLOCKS
from .errors import ErrorCode, failure
from .oplog import OperationLog


class FitPolicy(Enum):
    """分区分配策略"""
    FIRST_FIT = 'first_fit'
    BEST_FIT = 'best_fit'


@dataclass
class Region:
    """内存分区"""
    start_address: int   # 起始地址
    size: int            # 分区大小
    is_free: bool = True  # 是否空闲

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class MemoryManager:
    """
    内存管理器
    管理 total_size 大小的主存，维护有序分区表
    所有查找与修改都在同一把锁内完成，保证分配的原子性
    """

    def __init__(self, total_size: int = MEMORY_SIZE,
                 policy: FitPolicy = FitPolicy.FIRST_FIT,
                 max_regions: int = MAX_MEMORY_BLOCKS):
        """
        初始化内存管理器

        Args:
            total_size: 主存总大小
            policy: 默认分配策略
            max_regions: 分区表最大项数
        """
        if total_size <= 0:
            raise ValueError(f"无效的内存大小: {total_size}")
        if max_regions <= 0:
            raise ValueError(f"无效的分区表大小: {max_regions}")

        self.total_size = total_size
        self.policy = policy
        self.max_regions = max_regions
        self.lock = threading.RLock()

        # 初始时整个地址空间为一个空闲分区
        self.regions: List[Region] = [Region(0, total_size, True)]

        self.stats = {
            'allocations': 0,
            'failures': 0,
            'splits': 0,
        }

        self.log = OperationLog('memory')

    def set_event_emitter(self, emitter: Callable[[Dict[str, Any]], None]):
        self.log.set_event_emitter(emitter)

    # ------------------------- 分配接口 -------------------------
    def allocate(self, size: int, policy: Optional[FitPolicy] = None) -> Dict[str, Any]:
        """
        按指定策略分配内存

        Args:
            size: 请求大小
            policy: 分配策略，缺省使用构造时的默认策略

        Returns:
            成功时包含 address/size/policy，失败时包含 error/code
        """
        policy = policy or self.policy
        with self.lock:
            if size <= 0:
                self.stats['failures'] += 1
                message = f"Invalid memory request size {size}!"
                self.log.record('INVALID', message, size=size, policy=policy.value)
                return failure(ErrorCode.INVALID_SIZE, message, size=size)

            if policy == FitPolicy.BEST_FIT:
                index = self._find_best_fit(size)
            else:
                index = self._find_first_fit(size)

            if index is None:
                self.stats['failures'] += 1
                message = "No sufficient memory available!"
                self.log.record('NO_MEMORY', message, size=size, policy=policy.value)
                return failure(ErrorCode.INSUFFICIENT_MEMORY, message, size=size)

            needs_split = self.regions[index].size != size
            if needs_split and len(self.regions) >= self.max_regions:
                self.stats['failures'] += 1
                message = "Memory region table is full!"
                self.log.record('TABLE_FULL', message, size=size, policy=policy.value)
                return failure(ErrorCode.REGION_TABLE_FULL, message, size=size)

            region = self._allocate_region(index, size)
            self.stats['allocations'] += 1
            message = f"Allocated {size} units of memory at address {region.start_address}"
            self.log.record('ALLOCATE', message, address=region.start_address,
                            size=size, policy=policy.value)
            return {
                'success': True,
                'address': region.start_address,
                'size': size,
                'policy': policy.value,
                'message': message
            }

    def first_fit(self, size: int) -> Dict[str, Any]:
        """首次适应算法分配"""
        return self.allocate(size, FitPolicy.FIRST_FIT)

    def best_fit(self, size: int) -> Dict[str, Any]:
        """最佳适应算法分配"""
        return self.allocate(size, FitPolicy.BEST_FIT)

    # ------------------------- 内部逻辑 -------------------------
    def _find_first_fit(self, size: int) -> Optional[int]:
        """按地址顺序查找第一个足够大的空闲分区"""
        for i, region in enumerate(self.regions):
            if region.is_free and region.size >= size:
                return i
        return None

    def _find_best_fit(self, size: int) -> Optional[int]:
        """
        查找能满足请求的最小空闲分区
        大小相同时取地址最低者（严格小于才替换）
        """
        best_index = None
        min_size = None
        for i, region in enumerate(self.regions):
            if not region.is_free or region.size < size:
                continue
            if min_size is None or region.size < min_size:
                best_index = i
                min_size = region.size
        return best_index

    def _allocate_region(self, index: int, size: int) -> Region:
        """占用或拆分第 index 个分区，先定位后修改"""
        region = self.regions[index]
        if region.size == size:
            region.is_free = False
            return region

        remainder = Region(region.start_address + size, region.size - size, True)
        region.size = size
        region.is_free = False
        self.regions.insert(index + 1, remainder)
        self.stats['splits'] += 1
        return region

    # ------------------------- 查询接口 -------------------------
    def get_regions(self) -> List[Dict[str, Any]]:
        """获取分区表快照"""
        with self.lock:
            return [r.to_dict() for r in self.regions]

    def find_region(self, address: int) -> Optional[Dict[str, Any]]:
        """获取起始地址为 address 的分区"""
        with self.lock:
            for region in self.regions:
                if region.start_address == address:
                    return region.to_dict()
            return None

    def get_memory_info(self) -> Dict[str, Any]:
        """获取内存使用信息"""
        with self.lock:
            free_regions = [r for r in self.regions if r.is_free]
            free_size = sum(r.size for r in free_regions)
            largest_free = max((r.size for r in free_regions), default=0)
            # 外部碎片率：空闲空间中无法被最大空闲分区覆盖的比例
            fragmentation = (1 - largest_free / free_size) if free_size > 0 else 0.0
            return {
                'total_size': self.total_size,
                'used_size': self.total_size - free_size,
                'free_size': free_size,
                'region_count': len(self.regions),
                'free_region_count': len(free_regions),
                'largest_free_region': largest_free,
                'fragmentation': fragmentation,
                'max_regions': self.max_regions,
                'policy': self.policy.value,
                **self.stats
            }

    def get_operation_log(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        with self.lock:
            return self.log.get_entries(count)
