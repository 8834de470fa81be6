# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 文件系统模块
实现文件的创建、查找与读取
采用连续分配方式组织数据：每个文件占用一段连续盘块
"""

import threading
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

from ..config import MAX_FILES, MAX_FILENAME_LEN
from .disk import VirtualDisk
from .errors import ErrorCode, failure
from .oplog import OperationLog


@dataclass(frozen=True)
class FileRecord:
    """文件控制块 (FCB)"""
    name: str          # 文件名
    size: int          # 逻辑大小（字节）
    start_block: int   # 起始块号
    block_count: int   # 占用块数

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class FileSystem:
    """
    文件系统类
    维护按创建顺序排列的文件目录，目录项创建后不再修改或删除
    """

    def __init__(self, disk: VirtualDisk, max_files: int = MAX_FILES,
                 max_filename_len: int = MAX_FILENAME_LEN):
        """初始化文件系统"""
        if max_files <= 0:
            raise ValueError(f"无效的最大文件数: {max_files}")
        self.disk = disk
        self.max_files = max_files
        self.max_filename_len = max_filename_len
        self.lock = threading.RLock()

        # 文件目录（按创建顺序）
        self.directory: List[FileRecord] = []
        self.file_count = 0

        self.log = OperationLog('filesystem')

    def set_event_emitter(self, emitter: Callable[[Dict[str, Any]], None]):
        self.log.set_event_emitter(emitter)

    def _validate_name(self, name: str) -> Optional[str]:
        if not name:
            return "File name must not be empty!"
        if len(name) > self.max_filename_len:
            return f"File name longer than {self.max_filename_len} characters!"
        return None

    def create_file(self, name: str, size: int) -> Dict[str, Any]:
        """
        创建文件

        Args:
            name: 文件名
            size: 文件大小（字节）

        Returns:
            成功时包含文件记录，失败时包含 error/code，失败不修改任何结构
        """
        with self.lock:
            if self.file_count >= self.max_files:
                message = "Maximum file limit reached!"
                self.log.record('DIRECTORY_FULL', message, filename=name, size=size)
                return failure(ErrorCode.DIRECTORY_FULL, message, filename=name)

            error = self._validate_name(name)
            if error:
                self.log.record('INVALID', error, filename=name, size=size)
                return failure(ErrorCode.INVALID_NAME, error, filename=name)

            if size <= 0:
                message = f"Invalid file size {size}!"
                self.log.record('INVALID', message, filename=name, size=size)
                return failure(ErrorCode.INVALID_SIZE, message, filename=name)

            start_block = self.disk.allocate_contiguous_run(size)
            if start_block is None:
                message = "No sufficient disk space available!"
                self.log.record('NO_SPACE', message, filename=name, size=size)
                return failure(ErrorCode.INSUFFICIENT_STORAGE, message, filename=name)

            record = FileRecord(
                name=name,
                size=size,
                start_block=start_block,
                block_count=self.disk.blocks_needed(size)
            )
            self.directory.append(record)
            self.file_count += 1

            message = f"Created file {name} of size {size} at block {start_block}"
            self.log.record('CREATE', message, **record.to_dict())
            return {'success': True, 'message': message, **record.to_dict()}

    def find_file(self, name: str) -> Optional[FileRecord]:
        """按名字精确查找，同名时返回最早创建的文件"""
        with self.lock:
            for record in self.directory:
                if record.name == name:
                    return record
            return None

    def read_file(self, name: str) -> Dict[str, Any]:
        """读取文件（只记录将要读取的块范围）"""
        with self.lock:
            record = self.find_file(name)
            if record is None:
                message = "File not found!"
                self.log.record('NOT_FOUND', message, filename=name)
                return failure(ErrorCode.NOT_FOUND, message, filename=name)

            result = self.disk.read_blocks(record.start_block, record.block_count)
            self.log.record('READ', result['message'], filename=name,
                            start_block=record.start_block, block_count=record.block_count)
            return {**result, 'filename': name, 'size': record.size}

    def get_file_info(self, name: str) -> Dict[str, Any]:
        """获取文件信息"""
        record = self.find_file(name)
        if record is None:
            return failure(ErrorCode.NOT_FOUND, "File not found!", filename=name)
        return {'success': True, **record.to_dict()}

    def list_directory(self) -> Dict[str, Any]:
        """列出目录"""
        with self.lock:
            return {
                'success': True,
                'files': [r.to_dict() for r in self.directory],
                'count': self.file_count
            }

    def get_filesystem_stats(self) -> Dict[str, Any]:
        """获取文件系统统计信息"""
        with self.lock:
            used_bytes = sum(r.size for r in self.directory)
            allocated_bytes = sum(r.block_count for r in self.directory) * self.disk.block_size
            return {
                'file_count': self.file_count,
                'max_files': self.max_files,
                'max_filename_len': self.max_filename_len,
                'logical_bytes': used_bytes,
                'allocated_bytes': allocated_bytes,
                # 内部碎片：块尾部未使用的字节
                'internal_fragmentation': allocated_bytes - used_bytes
            }

    def get_operation_log(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        with self.lock:
            return self.log.get_entries(count)
