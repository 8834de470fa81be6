# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 任务管理模块
维护有上限的任务表，供调度器读取
"""

import threading
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List

from ..config import MAX_TASKS
from .errors import ErrorCode, failure


@dataclass
class Task:
    """
    进程控制块 (PCB)
    """
    pid: int                  # 任务ID
    arrival_time: int         # 到达时间
    burst_time: int           # 运行时间
    priority: int = 0         # 优先级
    remaining_time: int = -1  # 剩余运行时间（-1 表示等于运行时间）

    def __post_init__(self):
        if self.remaining_time < 0:
            self.remaining_time = self.burst_time

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TaskTable:
    """任务表"""

    def __init__(self, max_tasks: int = MAX_TASKS):
        self.max_tasks = max_tasks
        self.lock = threading.RLock()
        self.tasks: List[Task] = []

    def add_task(self, pid: int, arrival_time: int, burst_time: int,
                 priority: int = 0) -> Dict[str, Any]:
        """
        添加任务

        Returns:
            成功时包含任务信息，任务表已满或运行时间非正时返回失败结果
        """
        with self.lock:
            if len(self.tasks) >= self.max_tasks:
                return failure(ErrorCode.TASK_TABLE_FULL, "Maximum task limit reached!", pid=pid)
            if burst_time <= 0:
                return failure(ErrorCode.INVALID_SIZE, f"Invalid burst time {burst_time}!", pid=pid)

            task = Task(pid, arrival_time, burst_time, priority)
            self.tasks.append(task)
            return {'success': True, **task.to_dict()}

    def get_tasks(self) -> List[Task]:
        """获取任务副本（按加入顺序）"""
        with self.lock:
            return [replace(t) for t in self.tasks]

    def clear(self):
        with self.lock:
            self.tasks.clear()

    def __len__(self) -> int:
        return len(self.tasks)
