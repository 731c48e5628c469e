# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 虚拟磁盘模块
在内存中模拟固定数量的盘块，每个盘块记录状态、所属文件和标签

磁盘布局：
[保留区(超级块+元数据)][数据区]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config import BLOCK_SIZE, RESERVED_BLOCKS, TOTAL_BLOCKS


class BlockStatus(Enum):
    """盘块状态枚举"""
    FREE = 'free'             # 空闲
    USED = 'used'             # 已分配
    CORRUPTED = 'corrupted'   # 已损坏（仍属于原文件）
    RESERVED = 'reserved'     # 保留区


@dataclass
class DiskBlock:
    """盘块结构"""
    id: int
    status: BlockStatus = BlockStatus.FREE
    owner_file_id: Optional[str] = None   # 所属文件ID
    label: str = ''                       # 块内容标签，例如 "[a.txt:4]"

    def clear(self):
        """释放盘块：状态置为空闲并清除所属关系"""
        self.status = BlockStatus.FREE
        self.owner_file_id = None
        self.label = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'status': self.status.value,
            'file_id': self.owner_file_id,
            'label': self.label
        }


class VirtualDisk:
    """
    虚拟磁盘类
    整个生命周期内盘块数量固定，盘块对象只会被修改，不会被创建或销毁
    """

    def __init__(self, total_blocks: int = TOTAL_BLOCKS, block_size: int = BLOCK_SIZE,
                 reserved_count: int = RESERVED_BLOCKS):
        """初始化虚拟磁盘，标记保留区"""
        if reserved_count < 0 or reserved_count > total_blocks:
            raise ValueError(f"无效的保留块数: {reserved_count}")

        self.total_blocks = total_blocks
        self.block_size = block_size
        self.reserved_count = reserved_count
        self.blocks: List[DiskBlock] = [DiskBlock(id=i) for i in range(total_blocks)]

        for i in range(reserved_count):
            self.blocks[i].status = BlockStatus.RESERVED

    def is_valid_block(self, block_id: int) -> bool:
        return 0 <= block_id < self.total_blocks

    def is_data_block(self, block_id: int) -> bool:
        """块号是否位于数据区（非保留区）"""
        return self.reserved_count <= block_id < self.total_blocks

    def get_block(self, block_id: int) -> Optional[DiskBlock]:
        """获取指定盘块，块号无效时返回None"""
        if not self.is_valid_block(block_id):
            return None
        return self.blocks[block_id]

    def data_blocks(self) -> List[DiskBlock]:
        """数据区所有盘块（按块号升序）"""
        return self.blocks[self.reserved_count:]

    def blocks_with_status(self, status: BlockStatus) -> List[int]:
        """指定状态的所有块号（按块号升序）"""
        return [b.id for b in self.blocks if b.status == status]

    def count_status(self, status: BlockStatus) -> int:
        return sum(1 for b in self.blocks if b.status == status)

    def mark_used(self, block_id: int, file_id: str, label: str):
        """将盘块分配给文件"""
        block = self.blocks[block_id]
        block.status = BlockStatus.USED
        block.owner_file_id = file_id
        block.label = label

    def free_block(self, block_id: int):
        """释放一个数据块，保留区块不会被释放"""
        if self.is_data_block(block_id):
            self.blocks[block_id].clear()

    def clear_data_area(self):
        """将数据区全部重置为空闲（碎片整理使用）"""
        for block in self.data_blocks():
            block.clear()

    def get_block_map(self) -> List[Dict[str, Any]]:
        """获取全部盘块状态（用于可视化）"""
        return [b.to_dict() for b in self.blocks]

    def get_disk_info(self) -> Dict[str, Any]:
        """获取磁盘信息"""
        return {
            'total_blocks': self.total_blocks,
            'block_size': self.block_size,
            'total_size': self.total_blocks * self.block_size,
            'reserved_blocks': self.reserved_count,
            'data_start_block': self.reserved_count,
            'free_blocks': self.count_status(BlockStatus.FREE),
            'used_blocks': self.count_status(BlockStatus.USED),
            'corrupted_blocks': self.count_status(BlockStatus.CORRUPTED)
        }
