# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 块分配模块
实现连续分配、链接分配、索引分配三种选块策略

分配函数只负责选块，不修改磁盘；选块失败返回None，
由调用方在成功后统一标记，保证"全有或全无"
"""

from enum import Enum
from typing import List, Optional, Union

from .disk import BlockStatus, VirtualDisk


class AllocationMethod(Enum):
    """文件分配方式"""
    CONTIGUOUS = 'contiguous'   # 连续分配
    LINKED = 'linked'           # 链接分配
    INDEXED = 'indexed'         # 索引分配（额外占用一个索引块）

    @classmethod
    def parse(cls, value: Union['AllocationMethod', str]) -> Optional['AllocationMethod']:
        """将字符串解析为分配方式，未知名称返回None"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


def _free_data_blocks(disk: VirtualDisk) -> List[int]:
    """数据区内的空闲块号（升序）"""
    return [b.id for b in disk.data_blocks() if b.status == BlockStatus.FREE]


def allocate_contiguous(disk: VirtualDisk, size: int) -> Optional[List[int]]:
    """
    连续分配：首次适应，从左向右查找size个连续空闲块
    即使总空闲块足够，没有足够长的连续段也会失败
    """
    run_start = disk.reserved_count
    run_length = 0
    for block in disk.data_blocks():
        if block.status == BlockStatus.FREE:
            if run_length == 0:
                run_start = block.id
            run_length += 1
            if run_length == size:
                return list(range(run_start, run_start + size))
        else:
            run_length = 0
    return None


def allocate_linked(disk: VirtualDisk, size: int) -> Optional[List[int]]:
    """链接分配：按块号升序取前size个空闲块，不要求相邻"""
    free_blocks = _free_data_blocks(disk)
    if len(free_blocks) < size:
        return None
    return free_blocks[:size]


def allocate_indexed(disk: VirtualDisk, size: int) -> Optional[List[int]]:
    """索引分配：取前size+1个空闲块，第一个块作为索引块"""
    free_blocks = _free_data_blocks(disk)
    if len(free_blocks) < size + 1:
        return None
    return free_blocks[:size + 1]


_STRATEGIES = {
    AllocationMethod.CONTIGUOUS: allocate_contiguous,
    AllocationMethod.LINKED: allocate_linked,
    AllocationMethod.INDEXED: allocate_indexed,
}


def allocate(disk: VirtualDisk, method: Union[AllocationMethod, str],
             size_in_blocks: int) -> Optional[List[int]]:
    """
    按指定策略选择盘块

    Args:
        disk: 虚拟磁盘
        method: 分配方式（枚举或其字符串值）
        size_in_blocks: 文件数据块数

    Returns:
        选中的块号列表（分配顺序），空间不足或参数无效时返回None
    """
    method = AllocationMethod.parse(method)
    if method is None or size_in_blocks < 1:
        return None
    return _STRATEGIES[method](disk, size_in_blocks)
