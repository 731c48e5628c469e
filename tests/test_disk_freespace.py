# -*- coding: utf-8 -*-
"""
虚拟磁盘与空闲空间管理测试
"""

import pytest

from fs_simulator.core import BlockStatus, FreeRun, FreeSpaceMethod, VirtualDisk
from fs_simulator.core.freespace import (get_bitmap, get_counting_free_list,
                                         get_free_list, get_free_space_view,
                                         get_grouped_free_list)


def _flatten(groups):
    return [block_id for group in groups for block_id in group]


def test_disk_layout():
    """测试: 保留区与初始状态"""
    disk = VirtualDisk(total_blocks=256, block_size=4096, reserved_count=4)

    assert len(disk.blocks) == 256
    assert [b.status for b in disk.blocks[:4]] == [BlockStatus.RESERVED] * 4
    assert all(b.status == BlockStatus.FREE for b in disk.blocks[4:])
    assert disk.get_disk_info()['free_blocks'] == 252
    assert disk.get_block(256) is None
    assert disk.get_block(-1) is None


def test_invalid_reserved_count():
    with pytest.raises(ValueError):
        VirtualDisk(total_blocks=8, reserved_count=9)


def test_free_block_never_touches_reserved_area():
    """测试: 保留块不会被释放"""
    disk = VirtualDisk(total_blocks=16, reserved_count=4)
    disk.free_block(2)
    assert disk.blocks[2].status == BlockStatus.RESERVED


def test_bitmap_and_free_list_on_empty_disk(sim):
    """测试: 空磁盘的位图与空闲链表"""
    bitmap = sim.get_bitmap()
    assert len(bitmap) == 256
    assert bitmap[:4] == [False] * 4
    assert all(bitmap[4:])
    assert sim.get_free_list() == list(range(4, 256))


def test_grouping_on_empty_disk(sim):
    """测试: 成组链接法每组最多8块"""
    groups = sim.get_grouped_free_list()
    assert groups[0] == list(range(4, 12))
    assert all(len(g) == 8 for g in groups[:-1])
    assert len(groups) == 32
    assert groups[-1] == [252, 253, 254, 255]


def test_grouping_closes_on_used_block(sim):
    """测试: 遇到非空闲块时提前结束当前组"""
    a = sim.create_file('a.txt', 5)
    sim.create_file('b.txt', 3)
    sim.delete_file(a.id)

    groups = sim.get_grouped_free_list()
    assert groups[0] == [4, 5, 6, 7, 8]
    assert groups[1] == list(range(12, 20))


def test_counting_runs(sim):
    """测试: 计数法返回极大连续空闲段"""
    a = sim.create_file('a.txt', 5)
    sim.create_file('b.txt', 3)
    sim.delete_file(a.id)

    assert sim.get_counting_free_list() == [FreeRun(start=4, count=5), FreeRun(start=12, count=244)]


def test_counting_on_full_disk(small_sim):
    small_sim.create_file('full.dat', 10)
    assert small_sim.get_counting_free_list() == []
    assert small_sim.get_grouped_free_list() == []
    assert small_sim.get_free_list() == []


def test_views_agree_in_every_state(fragmented_sim):
    """测试: 计数法与成组法展开后都与空闲链表一致"""
    sim = fragmented_sim
    states = []

    def snapshot():
        free = sim.get_free_list()
        runs = [b for run in sim.get_counting_free_list() for b in run.block_ids()]
        groups = _flatten(sim.get_grouped_free_list())
        states.append((free, runs, groups))

    snapshot()
    sim.create_file('x.dat', 3, method='linked')
    snapshot()
    sim.simulate_crash(0.5)
    snapshot()
    sim.recover_corrupted_blocks()
    snapshot()
    sim.defragment()
    snapshot()

    for free, runs, groups in states:
        assert runs == free
        assert groups == free
        assert free == sorted(free)


def test_bitmap_matches_free_list(fragmented_sim):
    bitmap = get_bitmap(fragmented_sim.disk)
    free = get_free_list(fragmented_sim.disk)
    assert [i for i, is_free in enumerate(bitmap) if is_free] == free


def test_free_space_view_serialization(fragmented_sim):
    """测试: 各方法的视图可直接序列化"""
    disk = fragmented_sim.disk
    view = get_free_space_view(disk, FreeSpaceMethod.COUNTING)
    assert view['method'] == 'counting'
    assert view['data'] == [{'start': 4, 'count': 2}, {'start': 8, 'count': 2}, {'start': 12, 'count': 2}]
    assert view['free_blocks'] == 6

    assert get_free_space_view(disk, FreeSpaceMethod.GROUPING)['data'] == get_grouped_free_list(disk)
    assert get_free_space_view(disk, FreeSpaceMethod.LINKED_LIST)['data'] == [4, 5, 8, 9, 12, 13]
    assert len(get_free_space_view(disk, FreeSpaceMethod.BITMAP)['data']) == 14
    assert get_counting_free_list(disk)[0] == FreeRun(4, 2)
