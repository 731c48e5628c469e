# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 模拟器引擎
组合虚拟磁盘、文件系统、访问日志和随机数生成器，
对外提供同步的操作接口

引擎本身不加锁，多线程宿主需自行串行化所有调用；
"重置"即构造新实例并丢弃旧实例
"""

import random
from typing import Any, Dict, List, Optional, Union

from ..config import (BENCHMARK_DELETE_COUNT, BENCHMARK_FILE_COUNT,
                      BENCHMARK_REFILL_COUNT, BLOCK_SIZE, DEFAULT_CRASH_SEVERITY,
                      RESERVED_BLOCKS, ROOT_ID, TOTAL_BLOCKS)
from ..logger import get_logger
from .access_log import AccessLog, AccessLogEntry
from .allocator import AllocationMethod
from .crash import simulate_crash
from .defrag import DefragResult, defragment
from .disk import VirtualDisk
from .filesystem import DirectoryNode, FileEntry, FileSystem
from .freespace import (FreeRun, get_bitmap, get_counting_free_list,
                        get_free_list, get_grouped_free_list)
from .fsck import FsckReport, run_fsck
from .recovery import RecoveryResult, recover_corrupted_blocks
from .stats import DiskStats, get_fragmented_files, get_stats

logger = get_logger('simulator')

# 示例文件系统：目录 -> [(文件名, 块数, 分配方式)]
SAMPLE_LAYOUT = [
    ('Documents', [('report.pdf', 8, 'contiguous'), ('notes.txt', 2, 'linked'),
                   ('data.csv', 5, 'indexed'), ('thesis.docx', 12, 'contiguous')]),
    ('Images', [('photo1.jpg', 6, 'linked'), ('photo2.png', 4, 'contiguous'),
                ('banner.svg', 3, 'indexed')]),
    ('System', [('kernel.bin', 15, 'contiguous'), ('config.sys', 1, 'linked'),
                ('drivers.dll', 7, 'indexed')]),
    ('Logs', [('access.log', 3, 'linked'), ('error.log', 2, 'linked'),
              ('system.log', 4, 'contiguous')]),
]
SAMPLE_DELETE_INDICES = (1, 4)
SAMPLE_REFILL = [('resume.pdf', 3, 'linked'), ('budget.xlsx', 4, 'linked')]


class FileSystemSimulator:
    """
    文件系统模拟器

    Args:
        total_blocks: 盘块总数
        block_size: 盘块大小（字节）
        reserved_count: 保留块数
        rng: 注入的随机数生成器（崩溃与恢复使用）
        seed: 未提供rng时用于构造生成器的种子
    """

    def __init__(self, total_blocks: int = TOTAL_BLOCKS, block_size: int = BLOCK_SIZE,
                 reserved_count: int = RESERVED_BLOCKS, rng: Optional[random.Random] = None,
                 seed: Optional[int] = None):
        self.disk = VirtualDisk(total_blocks, block_size, reserved_count)
        self.access_log = AccessLog()
        self.filesystem = FileSystem(self.disk, self.access_log)
        self.rng = rng if rng is not None else random.Random(seed)

    @property
    def total_blocks(self) -> int:
        return self.disk.total_blocks

    @property
    def block_size(self) -> int:
        return self.disk.block_size

    @property
    def files(self) -> Dict[str, FileEntry]:
        return self.filesystem.files

    # ==================== 空闲空间 ====================
    def get_bitmap(self) -> List[bool]:
        return get_bitmap(self.disk)

    def get_free_list(self) -> List[int]:
        return get_free_list(self.disk)

    def get_grouped_free_list(self) -> List[List[int]]:
        return get_grouped_free_list(self.disk)

    def get_counting_free_list(self) -> List[FreeRun]:
        return get_counting_free_list(self.disk)

    # ==================== 文件操作 ====================
    def create_file(self, name: str, size_in_blocks: int, parent_id: str = ROOT_ID,
                    method: Union[AllocationMethod, str] = AllocationMethod.CONTIGUOUS) -> Optional[FileEntry]:
        return self.filesystem.create_file(name, size_in_blocks, parent_id, method)

    def create_directory(self, name: str, parent_id: str = ROOT_ID) -> Optional[FileEntry]:
        return self.filesystem.create_directory(name, parent_id)

    def delete_file(self, file_id: str) -> bool:
        return self.filesystem.delete_file(file_id)

    def read_file(self, file_id: str) -> Optional[AccessLogEntry]:
        return self.filesystem.read_file(file_id)

    def get_file(self, file_id: str) -> Optional[FileEntry]:
        return self.filesystem.get_file(file_id)

    def get_directory_tree(self, root_id: str = ROOT_ID) -> DirectoryNode:
        return self.filesystem.get_directory_tree(root_id)

    # ==================== 崩溃与恢复 ====================
    def simulate_crash(self, severity: float = DEFAULT_CRASH_SEVERITY) -> List[int]:
        return simulate_crash(self.disk, self.rng, severity)

    def recover_corrupted_blocks(self) -> RecoveryResult:
        return recover_corrupted_blocks(self.disk, self.filesystem, self.access_log, self.rng)

    def run_fsck(self) -> FsckReport:
        return run_fsck(self.disk, self.filesystem)

    # ==================== 优化 ====================
    def defragment(self) -> DefragResult:
        return defragment(self.disk, self.filesystem)

    def get_stats(self) -> DiskStats:
        return get_stats(self.disk, self.filesystem, self.access_log)

    def get_fragmented_files(self) -> List[Dict[str, Any]]:
        return get_fragmented_files(self.filesystem)

    # ==================== 演示数据 ====================
    def generate_sample_filesystem(self):
        """生成演示用文件系统，并删除部分文件制造碎片"""
        dir_ids = {}
        for dir_name, _ in SAMPLE_LAYOUT:
            dir_ids[dir_name] = self.create_directory(dir_name, ROOT_ID).id

        for dir_name, files in SAMPLE_LAYOUT:
            for name, size, method in files:
                self.create_file(name, size, dir_ids[dir_name], method)

        regular = self.filesystem.regular_files()
        for index in SAMPLE_DELETE_INDICES:
            if index < len(regular):
                self.delete_file(regular[index].id)

        for name, size, method in SAMPLE_REFILL:
            self.create_file(name, size, dir_ids['Documents'], method)

        logger.info("示例文件系统已生成: %d 个表项", len(self.files))


def benchmark_allocation_methods(seed: Optional[int] = None,
                                 total_blocks: int = TOTAL_BLOCKS) -> List[Dict[str, Any]]:
    """
    对三种分配方式做相同负载的性能对比：
    创建文件 -> 删除部分文件制造空洞 -> 再次创建 -> 读取全部文件
    """
    rng = random.Random(seed)
    results = []

    for method in AllocationMethod:
        sim = FileSystemSimulator(total_blocks=total_blocks, rng=random.Random(rng.getrandbits(32)))
        created = []
        for i in range(BENCHMARK_FILE_COUNT):
            entry = sim.create_file(f'bench_{i}.dat', rng.randint(3, 10), ROOT_ID, method)
            if entry:
                created.append(entry.id)

        for i in range(BENCHMARK_DELETE_COUNT):
            if i * 2 < len(created):
                sim.delete_file(created[i * 2])

        for i in range(BENCHMARK_REFILL_COUNT):
            sim.create_file(f'bench_new_{i}.dat', rng.randint(2, 7), ROOT_ID, method)

        for entry in sim.filesystem.regular_files():
            sim.read_file(entry.id)

        stats = sim.get_stats()
        results.append({
            'method': method.value,
            'avg_seek_time': stats.avg_seek_time,
            'avg_transfer_time': stats.avg_transfer_time,
            'total_time': round(stats.avg_seek_time + stats.avg_transfer_time, 2),
            'fragmentation': stats.fragmentation_percent
        })
    return results
