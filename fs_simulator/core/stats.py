# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 统计模块
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from .access_log import AccessLog, round_half_up
from .disk import BlockStatus, VirtualDisk
from .filesystem import FileSystem


@dataclass
class DiskStats:
    """磁盘统计信息"""
    total_blocks: int
    used_blocks: int
    free_blocks: int
    corrupted_blocks: int
    fragmentation_percent: int
    avg_seek_time: float
    avg_transfer_time: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_blocks': self.total_blocks,
            'used_blocks': self.used_blocks,
            'free_blocks': self.free_blocks,
            'corrupted_blocks': self.corrupted_blocks,
            'fragmentation_percent': self.fragmentation_percent,
            'avg_seek_time': self.avg_seek_time,
            'avg_transfer_time': self.avg_transfer_time
        }


def count_gaps(blocks: List[int]) -> int:
    """文件块序列中不相邻的相邻块对数"""
    return sum(1 for i in range(1, len(blocks)) if blocks[i] != blocks[i - 1] + 1)


def calculate_fragmentation(filesystem: FileSystem) -> int:
    """碎片率 = 不连续相邻块对数 / 最大可能间隔数 × 100"""
    files = filesystem.regular_files()
    fragments = sum(count_gaps(f.blocks) for f in files if len(f.blocks) > 1)
    max_gaps = sum(max(0, len(f.blocks) - 1) for f in files)
    if max_gaps == 0:
        return 0
    return int(round_half_up(fragments / max_gaps * 100))


def get_stats(disk: VirtualDisk, filesystem: FileSystem, access_log: AccessLog) -> DiskStats:
    """汇总统计信息"""
    return DiskStats(
        total_blocks=disk.total_blocks,
        used_blocks=disk.count_status(BlockStatus.USED),
        free_blocks=disk.count_status(BlockStatus.FREE),
        corrupted_blocks=disk.count_status(BlockStatus.CORRUPTED),
        fragmentation_percent=calculate_fragmentation(filesystem),
        avg_seek_time=access_log.average_seek_time(),
        avg_transfer_time=access_log.average_transfer_time()
    )


def get_fragmented_files(filesystem: FileSystem) -> List[Dict[str, Any]]:
    """列出存在碎片的文件，按间隔数降序"""
    result = []
    for entry in filesystem.regular_files():
        if len(entry.blocks) < 2:
            continue
        gaps = count_gaps(entry.blocks)
        if gaps > 0:
            result.append({
                'file_id': entry.id,
                'name': entry.name,
                'blocks': list(entry.blocks),
                'gaps': gaps
            })
    result.sort(key=lambda item: item['gaps'], reverse=True)
    return result
