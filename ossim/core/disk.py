# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 虚拟磁盘模块
实现 N 个等长盘块的模拟磁盘，采用位图管理，按连续块分配

- M = block_size（每个盘块大小）
- N = total_size // block_size（盘块数量）

位图中某一位为 1 表示该块已使用。块只会从空闲变为已用，不会被释放。
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from ..config import DISK_SIZE, BLOCK_SIZE
from .oplog import OperationLog


class VirtualDisk:
    """
    虚拟磁盘类
    只模拟块的占用情况，不保存块内容
    """

    def __init__(self, total_size: int = DISK_SIZE, block_size: int = BLOCK_SIZE):
        """初始化虚拟磁盘"""
        if block_size <= 0:
            raise ValueError(f"无效的块大小: {block_size}")
        if total_size <= 0 or total_size % block_size != 0:
            raise ValueError(f"磁盘大小 {total_size} 不是块大小 {block_size} 的整数倍")

        self.total_size = total_size
        self.block_size = block_size
        self.total_blocks = total_size // block_size
        self.free_blocks = self.total_blocks
        self.lock = threading.RLock()  # 可重入锁，用于同步访问

        # 位图（每字节 8 块）
        self.bitmap = bytearray((self.total_blocks + 7) // 8)

        # 操作记录（用于可视化）
        self.log = OperationLog('disk')

    def set_event_emitter(self, emitter: Callable[[Dict[str, Any]], None]):
        self.log.set_event_emitter(emitter)

    def _set_bit(self, block_id: int, used: bool):
        """设置位图中的某一位"""
        byte_index = block_id // 8
        bit_index = block_id % 8

        if used:
            self.bitmap[byte_index] |= (1 << bit_index)
        else:
            self.bitmap[byte_index] &= ~(1 << bit_index)

    def _get_bit(self, block_id: int) -> bool:
        """获取位图中某一位的状态"""
        byte_index = block_id // 8
        bit_index = block_id % 8
        return bool(self.bitmap[byte_index] & (1 << bit_index))

    def _check_range(self, start_block: int, count: int):
        if count < 0 or start_block < 0 or start_block + count > self.total_blocks:
            raise ValueError(f"无效的块范围: [{start_block}, {start_block + count})")

    def blocks_needed(self, size: int) -> int:
        """计算 size 字节需要的块数（向上取整）"""
        return (size + self.block_size - 1) // self.block_size

    def reserve_blocks(self, block_ids: List[int]) -> int:
        """
        将指定块标记为已使用（如元数据区、坏块）

        Returns:
            本次新标记的块数
        """
        for block_id in block_ids:
            self._check_range(block_id, 1)
        with self.lock:
            reserved = 0
            for block_id in block_ids:
                if not self._get_bit(block_id):
                    self._set_bit(block_id, True)
                    reserved += 1
            self.free_blocks -= reserved
            if reserved:
                self.log.record('RESERVE', f"Reserved {reserved} blocks",
                                block_ids=sorted(set(block_ids)))
            return reserved

    def allocate_contiguous_run(self, size: int) -> Optional[int]:
        """
        分配一段连续空闲块
        从左到右扫描位图，记录当前空闲段的起点和长度，遇到已用块则重新计数。
        第一个长度达到所需块数的空闲段即被占用。

        Returns:
            起始块号，没有足够长的连续空闲段则返回 None
        """
        blocks_needed = self.blocks_needed(size)
        if blocks_needed <= 0:
            return None

        with self.lock:
            start_block = None
            count = 0
            for i in range(self.total_blocks):
                if self._get_bit(i):
                    start_block = None
                    count = 0
                    continue
                if start_block is None:
                    start_block = i
                count += 1
                if count == blocks_needed:
                    break
            else:
                self.log.record('NO_SPACE', f"No contiguous run of {blocks_needed} free blocks",
                                blocks_needed=blocks_needed)
                return None

            for block_id in range(start_block, start_block + blocks_needed):
                self._set_bit(block_id, True)
            self.free_blocks -= blocks_needed
            self.log.record('ALLOCATE', f"Allocated blocks {start_block}-{start_block + blocks_needed - 1}",
                            start_block=start_block, block_count=blocks_needed)
            return start_block

    def read_blocks(self, start_block: int, count: int) -> Dict[str, Any]:
        """
        读取一段连续块
        不建模块内容，只记录读取的块范围
        """
        self._check_range(start_block, count)
        with self.lock:
            message = f"Reading {count} blocks starting from block {start_block}"
            self.log.record('READ', message, start_block=start_block, block_count=count)
            return {
                'success': True,
                'start_block': start_block,
                'block_count': count,
                'message': message
            }

    def largest_free_run(self) -> int:
        """最长连续空闲段长度"""
        with self.lock:
            longest = current = 0
            for i in range(self.total_blocks):
                if self._get_bit(i):
                    current = 0
                else:
                    current += 1
                    longest = max(longest, current)
            return longest

    def get_bitmap_status(self) -> List[bool]:
        """获取位图状态（True 表示已使用）"""
        with self.lock:
            return [self._get_bit(i) for i in range(self.total_blocks)]

    def get_disk_info(self) -> dict:
        """获取磁盘信息"""
        with self.lock:
            return {
                'total_blocks': self.total_blocks,
                'free_blocks': self.free_blocks,
                'used_blocks': self.total_blocks - self.free_blocks,
                'block_size': self.block_size,
                'total_size': self.total_size,
                'largest_free_run': self.largest_free_run()
            }

    def get_operation_log(self, count: Optional[int] = None) -> List[dict]:
        """获取操作日志"""
        with self.lock:
            return self.log.get_entries(count)
