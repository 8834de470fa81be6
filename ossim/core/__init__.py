# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 核心模块
"""

from .errors import ErrorCode
from .memory import MemoryManager, FitPolicy, Region
from .disk import VirtualDisk
from .filesystem import FileSystem, FileRecord
from .process import Task, TaskTable
from .scheduler import Scheduler, SchedulePolicy, ScheduleStep

__all__ = [
    'ErrorCode',
    'MemoryManager',
    'FitPolicy',
    'Region',
    'VirtualDisk',
    'FileSystem',
    'FileRecord',
    'Task',
    'TaskTable',
    'Scheduler',
    'SchedulePolicy',
    'ScheduleStep'
]
