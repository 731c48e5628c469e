# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 核心模块
"""

from .disk import VirtualDisk, DiskBlock, BlockStatus
from .allocator import AllocationMethod
from .access_log import AccessLog, AccessLogEntry, AccessOperation
from .filesystem import FileSystem, FileEntry, DirectoryNode
from .freespace import FreeSpaceMethod, FreeRun
from .fsck import FsckReport
from .defrag import DefragResult, BlockMove
from .recovery import RecoveryResult
from .stats import DiskStats
from .simulator import FileSystemSimulator, benchmark_allocation_methods

__all__ = [
    'VirtualDisk',
    'DiskBlock',
    'BlockStatus',
    'AllocationMethod',
    'AccessLog',
    'AccessLogEntry',
    'AccessOperation',
    'FileSystem',
    'FileEntry',
    'DirectoryNode',
    'FreeSpaceMethod',
    'FreeRun',
    'FsckReport',
    'DefragResult',
    'BlockMove',
    'RecoveryResult',
    'DiskStats',
    'FileSystemSimulator',
    'benchmark_allocation_methods'
]
