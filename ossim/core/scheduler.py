# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 处理机调度模块
实现先来先服务 (FCFS)、短作业优先 (SJF) 与时间片轮转 (RR) 三种调度算法

使用逻辑时钟：每执行一步时钟前进该步的执行单位数，不依赖真实时间。
调度器只读取任务描述，不修改调用者传入的任务。
"""

import threading
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import TIME_QUANTUM
from .oplog import OperationLog
from .process import Task


class SchedulePolicy(Enum):
    FCFS = 'fcfs'
    SJF = 'sjf'
    RR = 'rr'


@dataclass
class ScheduleStep:
    pid: int
    units: int
    start_time: int
    remaining_time: int
    message: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Scheduler:
    """处理机调度器（逻辑时钟驱动）"""

    def __init__(self, time_quantum: int = TIME_QUANTUM):
        self.time_quantum = time_quantum
        self.lock = threading.RLock()

        self.steps: List[ScheduleStep] = []
        self.last_policy: Optional[SchedulePolicy] = None
        self.logical_time: int = 0

        self.stats = {
            'runs': 0,
            'steps': 0,
            'context_switches': 0,
        }

        self.log = OperationLog('scheduler')

    def set_event_emitter(self, emitter: Callable[[Dict[str, Any]], None]):
        self.log.set_event_emitter(emitter)

    # ------------------------- 外部接口 -------------------------
    def run(self, policy: SchedulePolicy, tasks: Iterable[Task],
            quantum: Optional[int] = None) -> List[ScheduleStep]:
        if policy == SchedulePolicy.FCFS:
            return self.fcfs(tasks)
        if policy == SchedulePolicy.SJF:
            return self.sjf(tasks)
        return self.round_robin(tasks, quantum if quantum is not None else self.time_quantum)

    def fcfs(self, tasks: Iterable[Task]) -> List[ScheduleStep]:
        """先来先服务：按到达时间排序后依次执行完整运行时间"""
        ordered = sorted(tasks, key=lambda t: t.arrival_time)
        return self._run_to_completion(SchedulePolicy.FCFS, ordered)

    def sjf(self, tasks: Iterable[Task]) -> List[ScheduleStep]:
        """短作业优先：按运行时间排序后依次执行"""
        ordered = sorted(tasks, key=lambda t: t.burst_time)
        return self._run_to_completion(SchedulePolicy.SJF, ordered)

    def round_robin(self, tasks: Iterable[Task], quantum: int) -> List[ScheduleStep]:
        """
        时间片轮转：按给定顺序循环，每个任务每轮最多执行一个时间片

        Args:
            tasks: 任务序列（不会被修改）
            quantum: 时间片大小，必须为正
        """
        if quantum <= 0:
            raise ValueError(f"无效的时间片: {quantum}")

        queue = [replace(t, remaining_time=t.burst_time) for t in tasks]
        with self.lock:
            self._begin(SchedulePolicy.RR)
            while any(t.remaining_time > 0 for t in queue):
                for task in queue:
                    if task.remaining_time <= 0:
                        continue
                    units = min(quantum, task.remaining_time)
                    task.remaining_time -= units
                    self._record_step(task, units,
                                      f"Executing task {task.pid} for {units} time units")
            return list(self.steps)

    # ------------------------- 内部逻辑 -------------------------
    def _run_to_completion(self, policy: SchedulePolicy, ordered: List[Task]) -> List[ScheduleStep]:
        with self.lock:
            self._begin(policy)
            for task in ordered:
                self._record_step(replace(task, remaining_time=0), task.burst_time,
                                  f"Executing task {task.pid} with burst time {task.burst_time}")
            return list(self.steps)

    def _begin(self, policy: SchedulePolicy):
        self.steps = []
        self.logical_time = 0
        self.last_policy = policy
        self.stats['runs'] += 1

    def _record_step(self, task: Task, units: int, message: str):
        if self.steps and self.steps[-1].pid != task.pid:
            self.stats['context_switches'] += 1
        step = ScheduleStep(task.pid, units, self.logical_time, task.remaining_time, message)
        self.steps.append(step)
        self.logical_time += units
        self.stats['steps'] += 1
        self.log.record('EXECUTE', message, policy=self.last_policy.value, pid=step.pid,
                        units=units, start_time=step.start_time,
                        remaining_time=step.remaining_time)

    # ------------------------- 查询接口 -------------------------
    def get_gantt_data(self) -> List[Dict[str, Any]]:
        """获取甘特图数据（最近一次调度）"""
        with self.lock:
            return [
                {
                    'pid': s.pid,
                    'start': s.start_time,
                    'end': s.start_time + s.units,
                }
                for s in self.steps
            ]

    def get_stats(self) -> Dict[str, Any]:
        with self.lock:
            return {
                **self.stats,
                'policy': self.last_policy.value if self.last_policy else None,
                'time_quantum': self.time_quantum,
                'total_time': self.logical_time,
            }

    def get_operation_log(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        with self.lock:
            return self.log.get_entries(count)
