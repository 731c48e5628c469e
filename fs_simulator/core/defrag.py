# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 碎片整理模块

采用"快照 -> 清空 -> 重建"三步：
源区间与目标区间可能重叠，必须先保存所有块内容再清空数据区
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config import DEFRAG_TIME_PER_MOVE
from ..logger import get_logger
from .disk import BlockStatus, VirtualDisk
from .filesystem import FileSystem

logger = get_logger('defrag')


@dataclass
class BlockMove:
    """一次块移动"""
    from_block: int
    to_block: int

    def to_dict(self) -> Dict[str, int]:
        return {'from': self.from_block, 'to': self.to_block}


@dataclass
class DefragResult:
    """碎片整理结果"""
    moves: List[BlockMove] = field(default_factory=list)
    time_saved: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'moves': [m.to_dict() for m in self.moves],
            'move_count': len(self.moves),
            'time_saved': self.time_saved
        }


@dataclass
class _BlockSnapshot:
    status: BlockStatus
    owner_file_id: str
    label: str


def defragment(disk: VirtualDisk, filesystem: FileSystem) -> DefragResult:
    """
    碎片整理：按文件原首块位置顺序，将每个文件的块连续排列到数据区前部，
    文件内部块顺序保持不变
    """
    # 按原首块号排序（sorted为稳定排序）
    targets = sorted(
        (f for f in filesystem.regular_files() if f.blocks),
        key=lambda f: f.blocks[0]
    )

    # 1. 快照
    snapshot: Dict[int, _BlockSnapshot] = {}
    for entry in targets:
        for block_id in entry.blocks:
            block = disk.blocks[block_id]
            snapshot[block_id] = _BlockSnapshot(block.status, block.owner_file_id, block.label)

    # 2. 清空数据区
    disk.clear_data_area()

    # 3. 重建
    result = DefragResult()
    next_free = disk.reserved_count
    for entry in targets:
        new_blocks = []
        for old_id in entry.blocks:
            new_id = next_free
            next_free += 1
            saved = snapshot[old_id]
            block = disk.blocks[new_id]
            block.status = saved.status
            block.owner_file_id = saved.owner_file_id
            block.label = saved.label

            if old_id != new_id:
                result.moves.append(BlockMove(from_block=old_id, to_block=new_id))
            new_blocks.append(new_id)
        entry.blocks = new_blocks

    result.time_saved = len(result.moves) * DEFRAG_TIME_PER_MOVE
    logger.info("碎片整理完成: 移动 %d 个块", len(result.moves))
    return result
