# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 配置文件
模拟磁盘、分配策略、时间模型和服务端的全局配置
"""

import logging
import os


def _env_int(name, default):
    """读取整数环境变量，非法值记录错误并回退为默认值"""
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger('FileSystemSim.config').error(
            "环境变量 %s=%r 不是整数，使用默认值 %s", name, value, default)
        return default


# ==================== 磁盘配置 ====================
TOTAL_BLOCKS = 256       # 盘块数量
BLOCK_SIZE = 4096        # 每个盘块大小（字节）
RESERVED_BLOCKS = 4      # 前部保留块（超级块 + 元数据）
DISK_SIZE = BLOCK_SIZE * TOTAL_BLOCKS

# ==================== 目录配置 ====================
ROOT_ID = 'root'         # 根目录的固定ID
ROOT_NAME = '/'
FILE_PERMISSIONS = 'rw-r--r--'
DIR_PERMISSIONS = 'rwxr-xr-x'

# ==================== 空闲空间管理 ====================
FREE_GROUP_SIZE = 8      # 成组链接法每组最多块数

# ==================== 时间模型（示意值，非真实硬件参数） ====================
SINGLE_BLOCK_SEEK = 1        # 0或1个块时的固定寻道代价
SEEK_COST_PER_BLOCK = 0.1    # 相邻块号距离的寻道代价
TRANSFER_COST_PER_BLOCK = 0.5
DELETE_TOTAL_TIME = 0.1      # 删除操作的记账时间
RECOVER_SEEK_TIME = 2
RECOVER_TRANSFER_TIME = 1

# ==================== 崩溃与恢复 ====================
DEFAULT_CRASH_SEVERITY = 0.1
RECOVERY_PROBABILITY = 0.7   # 单个损坏块的恢复概率

# ==================== 碎片整理 ====================
DEFRAG_TIME_PER_MOVE = 0.8   # 每次块移动节省的时间（示意值）

# ==================== 性能测试 ====================
BENCHMARK_FILE_COUNT = 15
BENCHMARK_DELETE_COUNT = 5
BENCHMARK_REFILL_COUNT = 5

# ==================== 服务端配置 ====================
SERVER_HOST = os.environ.get('FS_SIM_HOST', '0.0.0.0')
SERVER_PORT = _env_int('FS_SIM_PORT', 3456)
SECRET_KEY = os.environ.get('FS_SIM_SECRET_KEY', 'fs_simulator_2025')
DEFAULT_SEED = _env_int('FS_SIM_SEED', None)   # 为空时使用随机种子
MAX_NAME_LENGTH = 64
LOG_RECENT_COUNT = 50        # 默认返回的访问日志条数

# ==================== 日志配置 ====================
LOG_LEVEL = os.environ.get('FS_SIM_LOG_LEVEL', 'INFO')
LOG_FILE = os.environ.get('FS_SIM_LOG_FILE')   # 为空时只输出到控制台
