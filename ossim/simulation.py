# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 模拟流程
组装各管理器，运行固定的示例工作负载并输出决策轨迹
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from . import config
from .core import (FileSystem, FitPolicy, MemoryManager, Scheduler, SchedulePolicy,
                   TaskTable, VirtualDisk)

# 示例任务：(pid, 到达时间, 运行时间, 优先级)
SAMPLE_TASKS = [
    (1, 0, 5, 1),
    (2, 1, 3, 1),
    (3, 2, 8, 1),
    (4, 3, 6, 1),
]

SAMPLE_QUANTUM = 2
FIRST_FIT_REQUESTS = [100, 200, 300]
BEST_FIT_REQUESTS = [150, 50, 250]
SAMPLE_FILES = [('file1.txt', 100), ('file2.txt', 200)]

DEFAULTS = {
    'MEMORY_SIZE': config.MEMORY_SIZE,
    'MAX_MEMORY_BLOCKS': config.MAX_MEMORY_BLOCKS,
    'DISK_SIZE': config.DISK_SIZE,
    'BLOCK_SIZE': config.BLOCK_SIZE,
    'MAX_FILES': config.MAX_FILES,
    'MAX_FILENAME_LEN': config.MAX_FILENAME_LEN,
    'MAX_TASKS': config.MAX_TASKS,
    'TIME_QUANTUM': config.TIME_QUANTUM,
}


class Simulation:
    """
    模拟器
    每个实例独占一组管理器，不使用进程级全局状态
    """

    def __init__(self, settings: Optional[Mapping[str, Any]] = None,
                 event_emitter: Optional[Callable[[str, Dict[str, Any]], None]] = None):
        """
        Args:
            settings: 配置项（键名同 config 模块常量），缺省项取 config 中的值
            event_emitter: 事件回调 (事件名, 日志项)
        """
        self.settings = dict(DEFAULTS)
        if settings:
            self.settings.update({k: v for k, v in settings.items() if k in DEFAULTS})
        self.event_emitter = event_emitter
        self.reset()

    def reset(self):
        """按当前配置重建所有管理器"""
        s = self.settings
        self.memory = MemoryManager(s['MEMORY_SIZE'], FitPolicy.FIRST_FIT, s['MAX_MEMORY_BLOCKS'])
        self.disk = VirtualDisk(s['DISK_SIZE'], s['BLOCK_SIZE'])
        self.filesystem = FileSystem(self.disk, s['MAX_FILES'], s['MAX_FILENAME_LEN'])
        self.tasks = TaskTable(s['MAX_TASKS'])
        self.scheduler = Scheduler(s['TIME_QUANTUM'])

        for event, manager in (('memory_event', self.memory),
                               ('disk_event', self.disk),
                               ('file_event', self.filesystem),
                               ('scheduler_event', self.scheduler)):
            manager.set_event_emitter(self._forward(event))

    def _forward(self, event: str):
        def emit(entry: Dict[str, Any]):
            if self.event_emitter:
                self.event_emitter(event, entry)
        return emit

    def load_sample_tasks(self):
        self.tasks.clear()
        for pid, arrival, burst, priority in SAMPLE_TASKS:
            self.tasks.add_task(pid, arrival, burst, priority)

    def run_workload(self) -> List[str]:
        """
        在当前状态上运行固定工作负载

        Returns:
            按顺序排列的轨迹行（含分节标题）
        """
        lines: List[str] = []

        def section(title: str):
            lines.append(title)

        def steps(result):
            lines.extend(step.message for step in result)

        self.load_sample_tasks()
        tasks = self.tasks.get_tasks()

        section("FCFS Scheduling:")
        steps(self.scheduler.run(SchedulePolicy.FCFS, tasks))
        section("")
        section("SJF Scheduling:")
        steps(self.scheduler.run(SchedulePolicy.SJF, tasks))
        section("")
        section(f"RR Scheduling (Quantum = {SAMPLE_QUANTUM}):")
        # 轮转调度沿用短作业优先排序后的任务队列
        sjf_queue = sorted(tasks, key=lambda t: t.burst_time)
        steps(self.scheduler.run(SchedulePolicy.RR, sjf_queue, SAMPLE_QUANTUM))

        section("")
        section("Memory Allocation (First Fit):")
        for size in FIRST_FIT_REQUESTS:
            lines.append(self.memory.first_fit(size))
        section("")
        section("Memory Allocation (Best Fit):")
        for size in BEST_FIT_REQUESTS:
            lines.append(self.memory.best_fit(size))

        section("")
        section("File Management:")
        for name, size in SAMPLE_FILES:
            lines.append(self.filesystem.create_file(name, size))
        for name, _ in SAMPLE_FILES:
            lines.append(self.filesystem.read_file(name))

        return [_trace_line(item) for item in lines]


def _trace_line(item) -> str:
    """日志项或结果字典转为一行轨迹文本"""
    if isinstance(item, str):
        return item
    return item.get('message') or item.get('error', '')


def main():
    simulation = Simulation()
    for line in simulation.run_workload():
        print(line)
