"""
FileID / FileInfo 测试

测试句柄的路径语义和信息投影
"""

from datetime import datetime

from treedrive.models.drive import FileKind, FileRecord
from treedrive.drive import FileID, FileInfo


def _handle(path, kind=FileKind.FOLDER, record_id=1, **kwargs):
    name = path.rsplit("/", 1)[-1]
    return FileID(record=FileRecord(id=record_id, name=name, kind=kind, path=path, **kwargs))


class TestFileID:
    """FileID 测试"""

    def test_path_and_kind(self):
        """测试路径和类型"""
        handle = _handle("/docs/a.txt", kind=FileKind.FILE)

        assert handle.path == "/docs/a.txt"
        assert handle.client_id == "/docs/a.txt"
        assert not handle.is_folder
        assert handle.file().name == "a.txt"

    def test_contains(self):
        """测试子树包含关系"""
        docs = _handle("/docs")

        assert docs.contains(_handle("/docs/a.txt"))
        assert docs.contains(_handle("/docs/sub/b.txt"))
        assert not docs.contains(docs)
        assert not docs.contains(_handle("/docsx"))
        assert not docs.contains(_handle("/"))

    def test_root_contains_everything(self):
        """测试根目录包含所有其他路径"""
        root = FileID(record=FileRecord.root(1))

        assert root.contains(_handle("/docs"))
        assert not root.contains(root)

    def test_equality_by_path(self):
        """测试按路径判等"""
        first = _handle("/docs", record_id=1)
        second = _handle("/docs", record_id=2)

        assert first == second
        assert hash(first) == hash(second)
        assert first != _handle("/other")
        assert len({first, second}) == 1

    def test_zero_value_does_not_exist(self):
        """测试零值句柄"""
        handle = FileID()

        assert not handle.exists
        assert handle.path == ""
        assert handle.record.kind == FileKind.NONE


class TestFileInfo:
    """FileInfo 测试"""

    def test_projection(self):
        """测试记录投影"""
        when = datetime(2026, 2, 6, 15, 30, 0)
        handle = _handle("/a.txt", kind=FileKind.FILE, size=5, modified_at=when)
        info = FileInfo(file_id=handle)

        assert info.name == "a.txt"
        assert info.size == 5
        assert info.mode == 0
        assert info.mod_time == when
        assert not info.is_dir
        assert info.file() is handle
        assert info.sys() is handle.record

    def test_children(self):
        """测试子项列表默认不存在，可由调用方附加"""
        info = FileInfo(file_id=_handle("/docs"))
        assert info.get_children() is None

        child = FileInfo(file_id=_handle("/docs/a.txt", kind=FileKind.FILE))
        info.set_children([child])

        assert info.is_dir
        assert [c.name for c in info.get_children()] == ["a.txt"]
