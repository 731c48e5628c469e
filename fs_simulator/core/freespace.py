# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 空闲空间管理模块
对虚拟磁盘的只读投影：位图法、空闲链表法、成组链接法、计数法
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from ..config import FREE_GROUP_SIZE
from .disk import BlockStatus, VirtualDisk


class FreeSpaceMethod(Enum):
    """空闲空间管理方法"""
    BITMAP = 'bitmap'
    LINKED_LIST = 'linked-list'
    GROUPING = 'grouping'
    COUNTING = 'counting'


@dataclass
class FreeRun:
    """计数法中的一段连续空闲块"""
    start: int
    count: int

    def block_ids(self) -> List[int]:
        return list(range(self.start, self.start + self.count))

    def to_dict(self) -> Dict[str, int]:
        return {'start': self.start, 'count': self.count}


def get_bitmap(disk: VirtualDisk) -> List[bool]:
    """位图法：每块一位，True表示空闲"""
    return [b.status == BlockStatus.FREE for b in disk.blocks]


def get_free_list(disk: VirtualDisk) -> List[int]:
    """空闲链表法：所有空闲块号（升序）"""
    return disk.blocks_with_status(BlockStatus.FREE)


def get_grouped_free_list(disk: VirtualDisk, group_size: int = FREE_GROUP_SIZE) -> List[List[int]]:
    """
    成组链接法
    按块号顺序扫描，收满group_size个或遇到非空闲块时结束当前组
    （按扫描位置分组，不要求组内连续）
    """
    groups: List[List[int]] = []
    current: List[int] = []

    for block in disk.blocks:
        if block.status == BlockStatus.FREE:
            current.append(block.id)
            if len(current) == group_size:
                groups.append(current)
                current = []
        elif current:
            groups.append(current)
            current = []

    if current:
        groups.append(current)
    return groups


def get_counting_free_list(disk: VirtualDisk) -> List[FreeRun]:
    """计数法：极大连续空闲段 (起始块号, 块数)"""
    runs: List[FreeRun] = []
    i = 0
    while i < disk.total_blocks:
        if disk.blocks[i].status == BlockStatus.FREE:
            start = i
            while i < disk.total_blocks and disk.blocks[i].status == BlockStatus.FREE:
                i += 1
            runs.append(FreeRun(start=start, count=i - start))
        else:
            i += 1
    return runs


def get_free_space_view(disk: VirtualDisk, method: FreeSpaceMethod) -> Dict[str, Any]:
    """按指定方法返回空闲空间视图（可直接序列化为JSON）"""
    if method == FreeSpaceMethod.BITMAP:
        data = get_bitmap(disk)
    elif method == FreeSpaceMethod.LINKED_LIST:
        data = get_free_list(disk)
    elif method == FreeSpaceMethod.GROUPING:
        data = get_grouped_free_list(disk)
    else:
        data = [run.to_dict() for run in get_counting_free_list(disk)]

    return {
        'method': method.value,
        'data': data,
        'free_blocks': disk.count_status(BlockStatus.FREE)
    }
