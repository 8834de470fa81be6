# -*- coding: utf-8 -*-
import pytest

from ossim.core import Scheduler, SchedulePolicy, Task, TaskTable, ErrorCode


@pytest.fixture
def tasks():
    return [Task(1, 0, 5, 1), Task(2, 1, 3, 1), Task(3, 2, 8, 1), Task(4, 3, 6, 1)]


def test_task_remaining_defaults_to_burst():
    assert Task(1, 0, 5).remaining_time == 5


def test_fcfs_orders_by_arrival(tasks):
    steps = Scheduler().fcfs(list(reversed(tasks)))
    assert [(s.pid, s.units) for s in steps] == [(1, 5), (2, 3), (3, 8), (4, 6)]
    assert [s.start_time for s in steps] == [0, 5, 8, 16]


def test_sjf_orders_by_burst(tasks):
    steps = Scheduler().sjf(tasks)
    assert [s.pid for s in steps] == [2, 1, 4, 3]


def test_round_robin_trace(tasks):
    scheduler = Scheduler()
    steps = scheduler.round_robin(tasks, 2)
    assert [(s.pid, s.units) for s in steps] == [
        (1, 2), (2, 2), (3, 2), (4, 2),
        (1, 2), (2, 1), (3, 2), (4, 2),
        (1, 1), (3, 2), (4, 2),
        (3, 2),
    ]
    assert sum(s.units for s in steps) == 22
    assert scheduler.get_stats()['total_time'] == 22
    # 输入任务不被修改
    assert all(t.remaining_time == t.burst_time for t in tasks)


def test_round_robin_messages(tasks):
    scheduler = Scheduler()
    scheduler.run(SchedulePolicy.RR, tasks[:1], 2)
    assert [e['message'] for e in scheduler.get_operation_log()] == [
        "Executing task 1 for 2 time units",
        "Executing task 1 for 2 time units",
        "Executing task 1 for 1 time units",
    ]


def test_run_dispatch_uses_default_quantum(tasks):
    steps = Scheduler(time_quantum=10).run(SchedulePolicy.RR, tasks)
    assert [s.units for s in steps] == [5, 3, 8, 6]


@pytest.mark.parametrize('quantum', [0, -1])
def test_invalid_quantum(tasks, quantum):
    with pytest.raises(ValueError):
        Scheduler().round_robin(tasks, quantum)


def test_gantt_data(tasks):
    scheduler = Scheduler()
    scheduler.fcfs(tasks[:2])
    assert scheduler.get_gantt_data() == [
        {'pid': 1, 'start': 0, 'end': 5},
        {'pid': 2, 'start': 5, 'end': 8},
    ]


def test_task_table_limits():
    table = TaskTable(max_tasks=1)
    assert table.add_task(1, 0, 5)['success']
    assert table.add_task(2, 0, 5)['code'] == ErrorCode.TASK_TABLE_FULL.value
    assert len(table) == 1


def test_task_table_rejects_empty_burst():
    table = TaskTable()
    assert table.add_task(1, 0, 0)['code'] == ErrorCode.INVALID_SIZE.value
    assert len(table) == 0


def test_steps_carry_trace_messages_beyond_log_capacity():
    scheduler = Scheduler()
    steps = scheduler.round_robin([Task(1, 0, 150)], 1)
    assert len(steps) == 150
    assert all(s.message == "Executing task 1 for 1 time units" for s in steps)
    assert len(scheduler.get_operation_log()) == 100


def test_fcfs_step_message():
    steps = Scheduler().fcfs([Task(7, 0, 4)])
    assert steps[0].message == "Executing task 7 with burst time 4"
