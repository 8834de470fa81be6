# -*- coding: utf-8 -*-
import pytest

from ossim.app import create_app


@pytest.fixture
def client():
    app = create_app({'TESTING': True, 'MAX_FILES': 2})
    return app.test_client()


def test_memory_allocate(client):
    resp = client.post('/api/memory/allocate', json={'size': 100})
    assert resp.status_code == 200
    assert resp.get_json()['address'] == 0

    resp = client.post('/api/memory/allocate', json={'size': 50, 'policy': 'best_fit'})
    assert resp.get_json()['address'] == 100

    regions = client.get('/api/memory').get_json()['regions']
    assert len(regions) == 3


def test_memory_allocate_validation(client):
    assert client.post('/api/memory/allocate', json={'size': 'x'}).status_code == 400
    assert client.post('/api/memory/allocate', json={'size': 1, 'policy': 'worst'}).status_code == 400
    data = client.post('/api/memory/allocate', json={'size': 0}).get_json()
    assert data['code'] == 'invalid_size'


def test_file_endpoints(client):
    data = client.post('/api/files', json={'filename': 'a', 'size': 100}).get_json()
    assert data['start_block'] == 0

    data = client.get('/api/files/a').get_json()
    assert data['message'] == "Reading 4 blocks starting from block 0"

    assert client.get('/api/files/zzz').get_json()['code'] == 'not_found'
    assert client.get('/api/files/a/info').get_json()['block_count'] == 4

    client.post('/api/files', json={'filename': 'b', 'size': 10})
    data = client.post('/api/files', json={'filename': 'c', 'size': 10}).get_json()
    assert data['code'] == 'directory_full'
    assert client.get('/api/files').get_json()['count'] == 2

    bitmap = client.get('/api/disk/bitmap').get_json()['bitmap']
    assert bitmap[:5] == [True] * 5
    assert client.get('/api/disk/info').get_json()['free_blocks'] == 27


def test_scheduler_endpoints(client):
    for pid, arrival, burst in ((1, 0, 5), (2, 1, 3)):
        resp = client.post('/api/tasks', json={'pid': pid, 'arrival_time': arrival,
                                               'burst_time': burst})
        assert resp.get_json()['success']

    data = client.post('/api/scheduler/run', json={'policy': 'rr', 'quantum': 2}).get_json()
    assert [s['units'] for s in data['steps']] == [2, 2, 2, 1, 1]

    gantt = client.get('/api/scheduler/gantt').get_json()['gantt']
    assert gantt[-1]['end'] == 8

    assert client.post('/api/scheduler/run', json={'policy': 'rr', 'quantum': 0}).status_code == 400
    assert client.post('/api/scheduler/run', json={'policy': 'lottery'}).status_code == 400


def test_simulation_run_and_reset(client):
    client.post('/api/memory/allocate', json={'size': 1000})
    trace = client.post('/api/simulation/run').get_json()['trace']
    assert "Allocated 100 units of memory at address 0" in trace

    stats = client.get('/api/stats').get_json()
    assert stats['memory']['used_size'] == 800
    assert stats['filesystem']['file_count'] == 2

    client.post('/api/simulation/reset')
    assert client.get('/api/stats').get_json()['memory']['used_size'] == 0


def test_config_override_reaches_managers():
    app = create_app({'MEMORY_SIZE': 256})
    data = app.test_client().get('/api/memory').get_json()
    assert data['info']['total_size'] == 256


@pytest.mark.parametrize('size', [32.9, '32', True, None])
def test_non_integer_size_rejected(client, size):
    resp = client.post('/api/memory/allocate', json={'size': size})
    assert resp.status_code == 400
    assert client.get('/api/memory').get_json()['info']['used_size'] == 0

    resp = client.post('/api/files', json={'filename': 'f', 'size': size})
    assert resp.status_code == 400
    assert client.get('/api/files').get_json()['count'] == 0


def test_fractional_task_fields_rejected(client):
    resp = client.post('/api/tasks', json={'pid': 1, 'arrival_time': 0, 'burst_time': 2.5})
    assert resp.status_code == 400
    resp = client.post('/api/scheduler/run', json={'policy': 'rr', 'quantum': 1.5})
    assert resp.status_code == 400


def test_environment_config(monkeypatch):
    monkeypatch.setenv('OSSIM_MEMORY_SIZE', '256')
    data = create_app().test_client().get('/api/memory').get_json()
    assert data['info']['total_size'] == 256


def test_overrides_take_precedence_over_environment(monkeypatch):
    monkeypatch.setenv('OSSIM_MEMORY_SIZE', '256')
    data = create_app({'MEMORY_SIZE': 512}).test_client().get('/api/memory').get_json()
    assert data['info']['total_size'] == 512
