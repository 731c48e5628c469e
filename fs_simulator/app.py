# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - Flask后端应用
提供RESTful API接口和WebSocket实时通信，供前端可视化层调用
"""

import threading
import time

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from .config import *  # noqa: F401,F403
from .core import AllocationMethod, FileSystemSimulator, benchmark_allocation_methods
from .core.freespace import FreeSpaceMethod, get_free_space_view
from .logger import get_logger, setup_logging

logger = get_logger('app')

FORBIDDEN_NAME_CHARS = '/\\:*?"<>|'


# 创建Flask应用 (纯API模式，前后端分离)
app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY
CORS(app, resources={r"/api/*": {"origins": "*"}})
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# 全局锁：引擎本身不加锁，所有调用在此串行化
engine_lock = threading.RLock()


def _parse_seed(value):
    if value is None or value == '':
        return None
    return int(value)


def build_simulator(seed=None, sample: bool = True) -> FileSystemSimulator:
    """构造新的模拟器实例（可选生成示例文件系统）"""
    sim = FileSystemSimulator(seed=seed)
    if sample:
        sim.generate_sample_filesystem()
    return sim


# 初始化核心组件
simulator = build_simulator(seed=DEFAULT_SEED)


def _validate_name(name) -> str:
    """验证文件/目录名，返回错误信息，合法时返回None"""
    if not isinstance(name, str) or not name.strip():
        return '名称不能为空'
    if len(name) > MAX_NAME_LENGTH:
        return f'名称长度不能超过{MAX_NAME_LENGTH}个字符'
    for char in FORBIDDEN_NAME_CHARS:
        if char in name:
            return f'名称不能包含特殊字符: {char}'
    return None


def _error(message: str, status: int = 400):
    return jsonify({'success': False, 'error': message}), status


# ==================== 磁盘API ====================
@app.route('/api/disk/info', methods=['GET'])
def disk_info():
    """获取磁盘信息"""
    with engine_lock:
        return jsonify(simulator.disk.get_disk_info())


@app.route('/api/disk/blocks', methods=['GET'])
def disk_blocks():
    """获取全部盘块状态（用于块网格可视化）"""
    with engine_lock:
        return jsonify({'blocks': simulator.disk.get_block_map()})


@app.route('/api/disk/bitmap', methods=['GET'])
def disk_bitmap():
    """获取磁盘位图"""
    with engine_lock:
        bitmap = simulator.get_bitmap()
    free = sum(bitmap)
    return jsonify({
        'bitmap': bitmap,
        'total': len(bitmap),
        'free': free,
        'used': len(bitmap) - free
    })


# ==================== 空闲空间API ====================
@app.route('/api/freespace/<method>', methods=['GET'])
def free_space(method):
    """按指定方法获取空闲空间视图"""
    try:
        view_method = FreeSpaceMethod(method)
    except ValueError:
        return _error(f'未知的空闲空间管理方法: {method}')

    with engine_lock:
        return jsonify({'success': True, **get_free_space_view(simulator.disk, view_method)})


# ==================== 文件API ====================
@app.route('/api/files', methods=['GET'])
def list_files():
    """获取文件列表"""
    include_dirs = request.args.get('dirs', 'true').lower() != 'false'
    with engine_lock:
        files = [f.to_dict() for f in simulator.filesystem.list_files(include_dirs)]
    return jsonify({'success': True, 'files': files, 'total': len(files)})


@app.route('/api/files', methods=['POST'])
def create_file():
    """创建文件"""
    data = request.get_json(silent=True) or {}
    name = data.get('name', '')
    parent_id = data.get('parent_id', ROOT_ID)

    error = _validate_name(name)
    if error:
        return _error(error)
    if not isinstance(parent_id, str):
        return _error('parent_id 需为字符串')

    try:
        size = int(data.get('size', 1))
    except (TypeError, ValueError):
        return _error('size 需为整数')
    if size < 1:
        return _error('size 必须 >= 1')

    method = AllocationMethod.parse(data.get('method', AllocationMethod.CONTIGUOUS.value))
    if method is None:
        return _error(f"未知的分配方式: {data.get('method')}")

    with engine_lock:
        if simulator.filesystem.get_directory(parent_id) is None:
            return _error(f'父目录 {parent_id} 不存在', 404)
        entry = simulator.create_file(name, size, parent_id, method)
        result = entry.to_dict() if entry else None

    if result is None:
        return jsonify({'success': False, 'error': f'磁盘空间不足，无法以 {method.value} 方式分配 {size} 个块'})

    socketio.emit('file_created', {'file': result})
    return jsonify({'success': True, 'file': result})


@app.route('/api/files/<file_id>', methods=['GET'])
def file_info(file_id):
    """获取文件信息"""
    with engine_lock:
        entry = simulator.get_file(file_id)
        if entry is None:
            return _error(f'文件 {file_id} 不存在', 404)
        result = entry.to_dict()
        result['path'] = simulator.filesystem.get_path(file_id)
    return jsonify({'success': True, 'file': result})


@app.route('/api/files/<file_id>/read', methods=['POST'])
def read_file(file_id):
    """读取文件，返回本次访问日志"""
    with engine_lock:
        log_entry = simulator.read_file(file_id)
    if log_entry is None:
        return _error(f'文件 {file_id} 不存在', 404)

    result = log_entry.to_dict()
    socketio.emit('file_read', {'log': result})
    return jsonify({'success': True, 'log': result})


@app.route('/api/files/<file_id>', methods=['DELETE'])
def delete_file(file_id):
    """删除文件"""
    with engine_lock:
        entry = simulator.get_file(file_id)
        if entry is None:
            return _error(f'文件 {file_id} 不存在', 404)
        if entry.is_directory:
            return _error('目录不可删除')
        freed_blocks = list(entry.blocks)
        success = simulator.delete_file(file_id)

    socketio.emit('file_deleted', {'file_id': file_id, 'freed_blocks': freed_blocks})
    return jsonify({'success': success, 'freed_blocks': freed_blocks})


# ==================== 目录API ====================
@app.route('/api/directories', methods=['POST'])
def make_directory():
    """创建目录"""
    data = request.get_json(silent=True) or {}
    name = data.get('name', '')
    parent_id = data.get('parent_id', ROOT_ID)

    error = _validate_name(name)
    if error:
        return _error(error)
    if not isinstance(parent_id, str):
        return _error('parent_id 需为字符串')

    with engine_lock:
        entry = simulator.create_directory(name, parent_id)
        result = entry.to_dict() if entry else None
    if result is None:
        return _error(f'父目录 {parent_id} 不存在', 404)

    socketio.emit('directory_created', {'directory': result})
    return jsonify({'success': True, 'directory': result})


@app.route('/api/tree', methods=['GET'])
def directory_tree():
    """获取目录树"""
    root_id = request.args.get('root', ROOT_ID)
    with engine_lock:
        tree = simulator.get_directory_tree(root_id).to_dict()
    return jsonify({'success': True, 'tree': tree})


# ==================== 崩溃与恢复API ====================
@app.route('/api/crash', methods=['POST'])
def crash_disk():
    """模拟磁盘崩溃"""
    data = request.get_json(silent=True) or {}
    try:
        severity = float(data.get('severity', DEFAULT_CRASH_SEVERITY))
    except (TypeError, ValueError):
        return _error('severity 需为数字')
    if not 0 < severity <= 1:
        return _error('severity 取值范围为 (0, 1]')

    with engine_lock:
        corrupted = simulator.simulate_crash(severity)

    socketio.emit('disk_crashed', {'severity': severity, 'corrupted_blocks': corrupted})
    return jsonify({'success': True, 'severity': severity, 'corrupted_blocks': corrupted})


@app.route('/api/recover', methods=['POST'])
def recover_disk():
    """恢复损坏块"""
    with engine_lock:
        result = simulator.recover_corrupted_blocks().to_dict()

    socketio.emit('disk_recovered', result)
    return jsonify({'success': True, **result})


@app.route('/api/fsck', methods=['GET'])
def fsck():
    """一致性检查"""
    with engine_lock:
        report = simulator.run_fsck()
    return jsonify({'success': True, **report.to_dict()})


# ==================== 优化API ====================
@app.route('/api/defragment', methods=['POST'])
def defragment_disk():
    """碎片整理"""
    with engine_lock:
        result = simulator.defragment().to_dict()

    socketio.emit('disk_defragmented', result)
    return jsonify({'success': True, **result})


@app.route('/api/fragmentation', methods=['GET'])
def fragmentation():
    """获取碎片文件列表"""
    with engine_lock:
        files = simulator.get_fragmented_files()
        percent = simulator.get_stats().fragmentation_percent
    return jsonify({'success': True, 'fragmentation_percent': percent, 'files': files})


@app.route('/api/benchmark', methods=['POST'])
def benchmark():
    """对比三种分配方式的性能（在独立的临时模拟器上运行）"""
    data = request.get_json(silent=True) or {}
    try:
        seed = _parse_seed(data.get('seed'))
    except (TypeError, ValueError):
        return _error('seed 需为整数')
    return jsonify({'success': True, 'results': benchmark_allocation_methods(seed)})


# ==================== 统计与日志API ====================
@app.route('/api/stats', methods=['GET'])
def get_stats():
    """获取统计信息"""
    with engine_lock:
        stats = simulator.get_stats().to_dict()
    return jsonify(stats)


@app.route('/api/log', methods=['GET'])
def access_log():
    """获取访问日志（最新的在前）"""
    count = request.args.get('count', LOG_RECENT_COUNT, type=int)
    with engine_lock:
        entries = [e.to_dict() for e in simulator.access_log.recent(count)]
        total = len(simulator.access_log)
    return jsonify({'log': entries, 'total': total})


@app.route('/api/reset', methods=['POST'])
def reset_simulator():
    """重置模拟器：构造新实例替换旧实例"""
    global simulator

    data = request.get_json(silent=True) or {}
    try:
        seed = _parse_seed(data.get('seed'))
    except (TypeError, ValueError):
        return _error('seed 需为整数')
    sample = data.get('sample', True)
    if not isinstance(sample, bool):
        return _error('sample 需为布尔值')

    with engine_lock:
        simulator = build_simulator(seed=seed, sample=sample)
        stats = simulator.get_stats().to_dict()

    logger.info("模拟器已重置 (seed=%s, sample=%s)", seed, sample)
    socketio.emit('simulator_reset', {'stats': stats})
    return jsonify({'success': True, 'message': '模拟器已重置', 'stats': stats})


# ==================== WebSocket事件 ====================
@socketio.on('connect')
def handle_connect():
    """客户端连接"""
    emit('connected', {'message': '已连接到服务器'})


@socketio.on('get_status')
def handle_get_status():
    """获取系统状态"""
    with engine_lock:
        status = {
            'disk': simulator.disk.get_disk_info(),
            'stats': simulator.get_stats().to_dict()
        }
    emit('status', status)


# 定期推送状态更新
def status_broadcaster():
    """状态广播器"""
    while True:
        socketio.sleep(1)
        with engine_lock:
            payload = {
                'timestamp': time.time(),
                'stats': simulator.get_stats().to_dict()
            }
        socketio.emit('status_update', payload)


# ==================== 主程序入口 ====================
def main():
    setup_logging()
    socketio.start_background_task(status_broadcaster)

    print("=" * 50)
    print("文件系统原理模拟器 API 服务")
    print("=" * 50)
    print(f"磁盘大小: {DISK_SIZE} 字节 ({TOTAL_BLOCKS} 块 x {BLOCK_SIZE} 字节)")
    print(f"保留块: {RESERVED_BLOCKS}")
    print("=" * 50)
    print(f"API/SocketIO: http://{SERVER_HOST}:{SERVER_PORT} (前后端分离模式)")
    print("=" * 50)

    socketio.run(app, host=SERVER_HOST, port=SERVER_PORT, debug=False, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
