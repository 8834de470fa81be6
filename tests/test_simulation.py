# -*- coding: utf-8 -*-
from ossim.simulation import Simulation, main

EXPECTED_TRACE = [
    "FCFS Scheduling:",
    "Executing task 1 with burst time 5",
    "Executing task 2 with burst time 3",
    "Executing task 3 with burst time 8",
    "Executing task 4 with burst time 6",
    "",
    "SJF Scheduling:",
    "Executing task 2 with burst time 3",
    "Executing task 1 with burst time 5",
    "Executing task 4 with burst time 6",
    "Executing task 3 with burst time 8",
    "",
    "RR Scheduling (Quantum = 2):",
    "Executing task 2 for 2 time units",
    "Executing task 1 for 2 time units",
    "Executing task 4 for 2 time units",
    "Executing task 3 for 2 time units",
    "Executing task 2 for 1 time units",
    "Executing task 1 for 2 time units",
    "Executing task 4 for 2 time units",
    "Executing task 3 for 2 time units",
    "Executing task 1 for 1 time units",
    "Executing task 4 for 2 time units",
    "Executing task 3 for 2 time units",
    "Executing task 3 for 2 time units",
    "",
    "Memory Allocation (First Fit):",
    "Allocated 100 units of memory at address 0",
    "Allocated 200 units of memory at address 100",
    "Allocated 300 units of memory at address 300",
    "",
    "Memory Allocation (Best Fit):",
    "Allocated 150 units of memory at address 600",
    "Allocated 50 units of memory at address 750",
    "No sufficient memory available!",
    "",
    "File Management:",
    "Created file file1.txt of size 100 at block 0",
    "Created file file2.txt of size 200 at block 4",
    "Reading 4 blocks starting from block 0",
    "Reading 7 blocks starting from block 4",
]


def test_workload_trace():
    assert Simulation().run_workload() == EXPECTED_TRACE


def test_main_prints_trace(capsys):
    main()
    assert capsys.readouterr().out.splitlines() == EXPECTED_TRACE


def test_events_forwarded():
    events = []
    sim = Simulation(event_emitter=lambda name, entry: events.append((name, entry['type'])))
    sim.memory.first_fit(10)
    sim.filesystem.create_file('f', 10)
    assert ('memory_event', 'ALLOCATE') in events
    assert ('disk_event', 'ALLOCATE') in events
    assert ('file_event', 'CREATE') in events


def test_settings_override_and_reset():
    sim = Simulation({'MEMORY_SIZE': 512, 'MAX_FILES': 1, 'UNRELATED': 'x'})
    assert sim.memory.total_size == 512
    sim.filesystem.create_file('a', 10)
    assert sim.filesystem.create_file('b', 10)['code'] == 'directory_full'
    sim.reset()
    assert sim.filesystem.file_count == 0
    assert 'UNRELATED' not in sim.settings


def test_second_run_continues_on_existing_state():
    sim = Simulation()
    sim.run_workload()
    trace = sim.run_workload()
    assert "No sufficient memory available!" in trace
    assert "Created file file1.txt of size 100 at block 11" in trace
    # 同名文件取最早创建者
    assert "Reading 4 blocks starting from block 0" in trace


def test_round_robin_follows_sjf_queue():
    trace = Simulation().run_workload()
    start = trace.index("RR Scheduling (Quantum = 2):") + 1
    assert trace[start:start + 4] == [
        "Executing task 2 for 2 time units",
        "Executing task 1 for 2 time units",
        "Executing task 4 for 2 time units",
        "Executing task 3 for 2 time units",
    ]
