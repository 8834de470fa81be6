# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 操作结果码
所有分配失败均为可预期的结果，以结果字典返回，不抛出异常
"""

from enum import Enum
from typing import Any, Dict


class ErrorCode(Enum):
    """失败结果码"""
    INSUFFICIENT_MEMORY = 'insufficient_memory'    # 没有足够大的空闲分区
    INSUFFICIENT_STORAGE = 'insufficient_storage'  # 没有足够长的连续空闲块
    DIRECTORY_FULL = 'directory_full'              # 目录已达文件数上限
    NOT_FOUND = 'not_found'                        # 文件不存在
    INVALID_SIZE = 'invalid_size'                  # 请求大小非正
    INVALID_NAME = 'invalid_name'                  # 文件名为空或过长
    REGION_TABLE_FULL = 'region_table_full'        # 分区表已满，无法再拆分
    TASK_TABLE_FULL = 'task_table_full'            # 任务表已满


def failure(code: ErrorCode, error: str, **extra: Any) -> Dict[str, Any]:
    """构造失败结果"""
    return {'success': False, 'error': error, 'code': code.value, **extra}
