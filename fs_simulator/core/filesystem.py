# -*- coding: utf-8 -*-
"""
文件系统原理模拟器 - 文件系统模块
维护文件表与目录树，实现文件的创建、读取、删除和目录操作

文件表以ID为键保存所有目录项，父子关系只通过ID引用，
根目录ID固定为 root
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import (DELETE_TOTAL_TIME, DIR_PERMISSIONS, FILE_PERMISSIONS,
                      ROOT_ID, ROOT_NAME)
from ..logger import get_logger
from .access_log import AccessLog, AccessLogEntry, AccessOperation
from .allocator import AllocationMethod, allocate
from .disk import BlockStatus, VirtualDisk

logger = get_logger('filesystem')


@dataclass
class FileEntry:
    """文件表项（文件或目录）"""
    id: str
    name: str
    inode: int
    is_directory: bool = False
    size_bytes: int = 0
    blocks: List[int] = field(default_factory=list)    # 按分配顺序
    parent_id: Optional[str] = None
    children: List[str] = field(default_factory=list)  # 仅目录使用
    permissions: str = FILE_PERMISSIONS
    created_at: float = field(default_factory=time.time)
    modified_at: float = field(default_factory=time.time)
    accessed_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'inode': self.inode,
            'is_directory': self.is_directory,
            'size': self.size_bytes,
            'blocks': list(self.blocks),
            'block_count': len(self.blocks),
            'parent_id': self.parent_id,
            'children': list(self.children),
            'permissions': self.permissions,
            'created_at': self.created_at,
            'modified_at': self.modified_at,
            'accessed_at': self.accessed_at
        }


@dataclass
class DirectoryNode:
    """目录树视图节点"""
    id: str
    name: str
    is_directory: bool
    size: int
    depth: int
    children: List['DirectoryNode'] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'is_directory': self.is_directory,
            'size': self.size,
            'depth': self.depth,
            'children': [child.to_dict() for child in self.children]
        }


class FileSystem:
    """
    文件系统类
    负责文件表、目录树，以及与虚拟磁盘之间的分配/释放
    """

    def __init__(self, disk: VirtualDisk, access_log: AccessLog):
        """初始化文件系统，创建根目录"""
        self.disk = disk
        self.access_log = access_log
        self.files: Dict[str, FileEntry] = {}
        self.next_inode = 1

        self.files[ROOT_ID] = FileEntry(
            id=ROOT_ID,
            name=ROOT_NAME,
            inode=self._allocate_inode(),
            is_directory=True,
            permissions=DIR_PERMISSIONS
        )

    def _allocate_inode(self) -> int:
        """分配下一个iNode号（单调递增）"""
        inode = self.next_inode
        self.next_inode += 1
        return inode

    def get_directory(self, dir_id: Optional[str]) -> Optional[FileEntry]:
        """获取目录项，不存在或不是目录时返回None"""
        entry = self.files.get(dir_id) if dir_id is not None else None
        if entry is None or not entry.is_directory:
            return None
        return entry

    def get_file(self, file_id: str) -> Optional[FileEntry]:
        return self.files.get(file_id)

    def list_files(self, include_directories: bool = True) -> List[FileEntry]:
        """按创建顺序列出文件表项"""
        return [f for f in self.files.values() if include_directories or not f.is_directory]

    def regular_files(self) -> List[FileEntry]:
        return self.list_files(include_directories=False)

    def create_file(self, name: str, size_in_blocks: int, parent_id: str = ROOT_ID,
                    method: Union[AllocationMethod, str] = AllocationMethod.CONTIGUOUS) -> Optional[FileEntry]:
        """
        创建新文件

        Args:
            name: 文件名
            size_in_blocks: 数据块数
            parent_id: 父目录ID
            method: 分配方式

        Returns:
            新文件表项；父目录不存在或空间不足时返回None（不修改任何状态）
        """
        parent = self.get_directory(parent_id)
        if parent is None:
            logger.debug("创建文件 %s 失败：父目录 %s 不存在", name, parent_id)
            return None

        allocated = allocate(self.disk, method, size_in_blocks)
        if allocated is None:
            logger.debug("创建文件 %s 失败：%s 方式无法分配 %s 个块", name, method, size_in_blocks)
            return None

        inode = self._allocate_inode()
        file_id = f'file_{inode}'
        entry = FileEntry(
            id=file_id,
            name=name,
            inode=inode,
            size_bytes=size_in_blocks * self.disk.block_size,
            blocks=allocated,
            parent_id=parent.id
        )

        # 标记盘块为已分配
        for block_id in allocated:
            self.disk.mark_used(block_id, file_id, f'[{name}:{block_id}]')

        self.files[file_id] = entry
        parent.children.append(file_id)

        # 传输时间只计数据块，索引块不计入
        self.access_log.record(AccessOperation.CREATE, file_id, name, allocated,
                               transfer_blocks=size_in_blocks)
        return entry

    def create_directory(self, name: str, parent_id: str = ROOT_ID) -> Optional[FileEntry]:
        """创建目录；父目录不存在时返回None"""
        parent = self.get_directory(parent_id)
        if parent is None:
            logger.debug("创建目录 %s 失败：父目录 %s 不存在", name, parent_id)
            return None

        inode = self._allocate_inode()
        entry = FileEntry(
            id=f'dir_{inode}',
            name=name,
            inode=inode,
            is_directory=True,
            parent_id=parent.id,
            permissions=DIR_PERMISSIONS
        )
        self.files[entry.id] = entry
        parent.children.append(entry.id)
        return entry

    def delete_file(self, file_id: str) -> bool:
        """删除文件（目录不可删除）"""
        entry = self.files.get(file_id)
        if entry is None or entry.is_directory:
            return False

        for block_id in entry.blocks:
            self.disk.free_block(block_id)

        parent = self.files.get(entry.parent_id)
        if parent is not None and file_id in parent.children:
            parent.children.remove(file_id)

        self.access_log.append(AccessLogEntry(
            operation=AccessOperation.DELETE,
            file_id=file_id,
            file_name=entry.name,
            blocks=list(entry.blocks),
            seek_time=0,
            transfer_time=0,
            total_time=DELETE_TOTAL_TIME
        ))

        del self.files[file_id]
        return True

    def read_file(self, file_id: str) -> Optional[AccessLogEntry]:
        """读取文件：计算访问代价，存在损坏块时读取失败"""
        entry = self.files.get(file_id)
        if entry is None:
            return None

        corrupted = any(
            self.disk.blocks[b].status == BlockStatus.CORRUPTED for b in entry.blocks
        )
        entry.accessed_at = time.time()
        if corrupted:
            logger.warning("读取文件 %s 时遇到损坏块", entry.name)
        return self.access_log.record(
            AccessOperation.READ, file_id, entry.name, entry.blocks, success=not corrupted
        )

    def get_directory_tree(self, node_id: str = ROOT_ID, depth: int = 0) -> DirectoryNode:
        """递归构建目录树视图"""
        entry = self.files.get(node_id)
        if entry is None:
            return DirectoryNode(id=node_id, name='unknown', is_directory=False, size=0, depth=depth)

        node = DirectoryNode(
            id=entry.id,
            name=entry.name,
            is_directory=entry.is_directory,
            size=entry.size_bytes,
            depth=depth
        )
        if entry.is_directory:
            node.children = [self.get_directory_tree(child_id, depth + 1) for child_id in entry.children]
        return node

    def get_path(self, file_id: str) -> Optional[str]:
        """获取从根目录开始的完整路径"""
        entry = self.files.get(file_id)
        if entry is None:
            return None

        parts = []
        while entry is not None and entry.id != ROOT_ID:
            parts.append(entry.name)
            entry = self.files.get(entry.parent_id)
        return '/' + '/'.join(reversed(parts))
