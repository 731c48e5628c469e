# -*- coding: utf-8 -*-
"""
测试公共夹具
"""

import pytest

from fs_simulator.core import FileSystemSimulator


@pytest.fixture
def sim():
    """空磁盘模拟器（256块，保留4块，固定种子）"""
    return FileSystemSimulator(seed=42)


@pytest.fixture
def small_sim():
    """小磁盘模拟器：数据区为块 4..13，共10块"""
    return FileSystemSimulator(total_blocks=14, reserved_count=4, seed=42)


@pytest.fixture
def fragmented_sim(small_sim):
    """
    小磁盘上创建5个2块文件后删除第1、3、5个：
    空闲块为 4,5 / 8,9 / 12,13
    """
    ids = [small_sim.create_file(f'f{i}.dat', 2).id for i in range(5)]
    for file_id in ids[0::2]:
        small_sim.delete_file(file_id)
    return small_sim


def assert_invariants(sim):
    """检查数据模型不变式"""
    disk = sim.disk
    owners = {}
    for entry in sim.files.values():
        assert len(entry.blocks) == len(set(entry.blocks))
        for block_id in entry.blocks:
            assert disk.reserved_count <= block_id < disk.total_blocks
            owners[block_id] = entry.id

    for block in disk.blocks:
        if block.id < disk.reserved_count:
            assert block.status.value == 'reserved'
        elif block.status.value in ('used', 'corrupted'):
            assert owners.get(block.id) == block.owner_file_id
        else:
            assert block.id not in owners

    for entry in sim.files.values():
        if entry.id == 'root':
            continue
        parent = sim.files[entry.parent_id]
        assert parent.is_directory
        assert parent.children.count(entry.id) == 1

    inodes = [e.inode for e in sim.files.values()]
    assert inodes == sorted(inodes)
    assert len(set(inodes)) == len(inodes)


@pytest.fixture
def check_invariants():
    return assert_invariants
