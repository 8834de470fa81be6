# -*- coding: utf-8 -*-
"""
操作系统课程设计 - Flask后端应用
提供RESTful API接口和WebSocket实时通信
"""

from typing import Any, Dict, Mapping, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from .core import FitPolicy, SchedulePolicy
from .simulation import Simulation

socketio = SocketIO()
api = Blueprint('api', __name__, url_prefix='/api')


def _sim() -> Simulation:
    return current_app.extensions['ossim']


def _emit_event(event: str, entry: Dict[str, Any]):
    """将管理器日志推送给前端"""
    try:
        socketio.emit(event, entry)
    except Exception:
        # 推送失败不影响分配流程
        pass


def _bad_request(error: str):
    return jsonify({'success': False, 'error': error}), 400


def _int_field(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    # 只接受 JSON 整数，小数与数字字符串一律视为非法
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    创建Flask应用

    配置加载顺序：config 模块常量 -> OSSIM_ 前缀环境变量 -> overrides
    """
    app = Flask(__name__)
    app.config.from_object('ossim.config')
    app.config.from_prefixed_env('OSSIM')
    if overrides:
        app.config.update(overrides)

    CORS(app, resources={r"/api/*": {"origins": "*"}})
    socketio.init_app(app, cors_allowed_origins="*", async_mode='threading')

    app.extensions['ossim'] = Simulation(app.config, event_emitter=_emit_event)
    app.register_blueprint(api)
    return app


# ==================== 内存管理API ====================
@api.route('/memory', methods=['GET'])
def memory_status():
    """获取分区表与内存使用信息"""
    memory = _sim().memory
    return jsonify({'regions': memory.get_regions(), 'info': memory.get_memory_info()})


@api.route('/memory/allocate', methods=['POST'])
def allocate_memory():
    """分配内存"""
    data = request.get_json(silent=True) or {}
    size = _int_field(data, 'size')
    if size is None:
        return _bad_request('size 必须为整数')
    try:
        policy = FitPolicy(data.get('policy', FitPolicy.FIRST_FIT.value))
    except ValueError:
        return _bad_request('未知的分配策略')

    return jsonify(_sim().memory.allocate(size, policy))


@api.route('/memory/log', methods=['GET'])
def memory_log():
    count = request.args.get('count', 20, type=int)
    return jsonify({'log': _sim().memory.get_operation_log(count)})


# ==================== 磁盘API ====================
@api.route('/disk/info', methods=['GET'])
def disk_info():
    """获取磁盘信息"""
    return jsonify(_sim().disk.get_disk_info())


@api.route('/disk/bitmap', methods=['GET'])
def disk_bitmap():
    """获取位图状态"""
    disk = _sim().disk
    return jsonify({
        'bitmap': disk.get_bitmap_status(),
        'total_blocks': disk.total_blocks,
        'block_size': disk.block_size
    })


@api.route('/disk/log', methods=['GET'])
def disk_log():
    """获取磁盘操作日志"""
    count = request.args.get('count', 20, type=int)
    return jsonify({'log': _sim().disk.get_operation_log(count)})


# ==================== 文件API ====================
@api.route('/files', methods=['GET'])
def list_files():
    """列出目录"""
    return jsonify(_sim().filesystem.list_directory())


@api.route('/files', methods=['POST'])
def create_file():
    """创建文件"""
    data = request.get_json(silent=True) or {}
    filename = data.get('filename', '')
    size = _int_field(data, 'size')
    if not isinstance(filename, str):
        return _bad_request('filename 必须为字符串')
    if size is None:
        return _bad_request('size 必须为整数')

    return jsonify(_sim().filesystem.create_file(filename, size))


@api.route('/files/<filename>', methods=['GET'])
def read_file(filename):
    """读取文件"""
    return jsonify(_sim().filesystem.read_file(filename))


@api.route('/files/<filename>/info', methods=['GET'])
def file_info(filename):
    """获取文件信息"""
    return jsonify(_sim().filesystem.get_file_info(filename))


# ==================== 调度API ====================
@api.route('/tasks', methods=['GET'])
def list_tasks():
    """获取任务表"""
    return jsonify({'tasks': [t.to_dict() for t in _sim().tasks.get_tasks()]})


@api.route('/tasks', methods=['POST'])
def add_task():
    """添加任务"""
    data = request.get_json(silent=True) or {}
    fields = {key: _int_field(data, key) for key in ('pid', 'arrival_time', 'burst_time')}
    if any(v is None for v in fields.values()):
        return _bad_request('pid/arrival_time/burst_time 必须为整数')
    priority = _int_field(data, 'priority') if 'priority' in data else 0
    if priority is None:
        return _bad_request('priority 必须为整数')

    return jsonify(_sim().tasks.add_task(priority=priority, **fields))


@api.route('/scheduler/run', methods=['POST'])
def run_scheduler():
    """对任务表运行一次调度"""
    data = request.get_json(silent=True) or {}
    try:
        policy = SchedulePolicy(data.get('policy', SchedulePolicy.FCFS.value))
    except ValueError:
        return _bad_request('未知的调度算法')

    quantum = None
    if 'quantum' in data:
        quantum = _int_field(data, 'quantum')
        if quantum is None or quantum <= 0:
            return _bad_request('quantum 必须为正整数')

    sim = _sim()
    steps = sim.scheduler.run(policy, sim.tasks.get_tasks(), quantum)
    return jsonify({
        'success': True,
        'policy': policy.value,
        'steps': [s.to_dict() for s in steps],
        'stats': sim.scheduler.get_stats()
    })


@api.route('/scheduler/gantt', methods=['GET'])
def scheduler_gantt():
    """获取甘特图数据"""
    return jsonify({'gantt': _sim().scheduler.get_gantt_data()})


# ==================== 模拟流程API ====================
@api.route('/simulation/run', methods=['POST'])
def run_simulation():
    """在全新状态上运行示例工作负载"""
    sim = _sim()
    sim.reset()
    trace = sim.run_workload()
    return jsonify({'success': True, 'trace': trace})


@api.route('/simulation/reset', methods=['POST'])
def reset_simulation():
    """重置所有管理器"""
    _sim().reset()
    return jsonify({'success': True})


@api.route('/stats', methods=['GET'])
def get_all_stats():
    """获取所有统计信息"""
    return jsonify(_collect_stats(_sim()))


def _collect_stats(sim: Simulation) -> Dict[str, Any]:
    return {
        'memory': sim.memory.get_memory_info(),
        'disk': sim.disk.get_disk_info(),
        'filesystem': sim.filesystem.get_filesystem_stats(),
        'scheduler': sim.scheduler.get_stats(),
        'tasks': len(sim.tasks)
    }


# ==================== WebSocket事件 ====================
@socketio.on('connect')
def handle_connect():
    """客户端连接"""
    emit('connected', {'message': '已连接到服务器'})


@socketio.on('get_status')
def handle_get_status():
    """获取系统状态"""
    emit('status', _collect_stats(_sim()))


# ==================== 主程序入口 ====================
def serve():
    app = create_app()
    settings = app.extensions['ossim'].settings

    print("=" * 50)
    print("操作系统课程设计 - 资源管理模拟器 API 服务")
    print("=" * 50)
    print(f"内存大小: {settings['MEMORY_SIZE']}")
    print(f"磁盘大小: {settings['DISK_SIZE']} 字节 (块大小 {settings['BLOCK_SIZE']} 字节)")
    print(f"时间片: {settings['TIME_QUANTUM']}")
    print("=" * 50)
    print(f"API/SocketIO: http://localhost:{app.config['SERVER_PORT']}")
    print("=" * 50)

    socketio.run(app, host=app.config['SERVER_HOST'], port=app.config['SERVER_PORT'],
                 debug=False, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    serve()
