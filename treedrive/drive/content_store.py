"""
内容存储

不可变 blob 的扁平目录。每次写入分配一个新的 blob，已有 blob 永不改写
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import BinaryIO, Tuple, Union

from treedrive.drive.errors import ContentError, ContentNotFoundError

logger = logging.getLogger(__name__)


# 流式复制的块大小
CHUNK_SIZE = 64 * 1024

# blob 文件名前缀
BLOB_PREFIX = "c"

ByteSource = Union[bytes, bytearray, BinaryIO]


class ContentStore:
    """
    内容 blob 存储

    特性:
    - blob 名称由 tempfile.mkstemp 在存储目录内分配，互不冲突
    - 写入失败时删除未完成的新 blob，旧 blob 不受影响
    - 大小在写入时测量，读取时直接信任

    示例:
        >>> store = ContentStore(Path("/var/lib/treedrive/content"))
        >>> blob_id, size = store.write(b"hello")
        >>> with store.read(blob_id) as f:
        ...     data = f.read()
    """

    def __init__(self, storage_dir: Path):
        """
        初始化内容存储

        Args:
            storage_dir: 存储目录路径
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def write(self, data: ByteSource) -> Tuple[str, int]:
        """
        写入新 blob

        Args:
            data: bytes 或可读的二进制流

        Returns:
            (blob_id, 写入字节数)

        Raises:
            ContentError: 无法创建或写入 blob
        """
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.storage_dir, prefix=BLOB_PREFIX)
        except OSError as e:
            logger.error(f"Can't open blob for writing in {self.storage_dir}: {e}")
            raise ContentError("Can't open file for writing") from e

        blob_path = Path(tmp_path)
        try:
            with os.fdopen(fd, "wb") as f:
                size = self._copy(data, f)
        except Exception as e:
            # 删除未写完的 blob
            if blob_path.exists():
                blob_path.unlink()
            logger.error(f"Can't write blob {blob_path.name}: {e}")
            raise ContentError("Can't write data", details={"blob_id": blob_path.name}) from e

        logger.debug(f"Stored blob {blob_path.name} ({size} bytes)")
        return blob_path.name, size

    @staticmethod
    def _copy(data: ByteSource, target: BinaryIO) -> int:
        """把数据流式写入 target，返回字节数"""
        if isinstance(data, (bytes, bytearray)):
            target.write(data)
            return len(data)

        size = 0
        while True:
            chunk = data.read(CHUNK_SIZE)
            if not chunk:
                break
            target.write(chunk)
            size += len(chunk)
        return size

    def read(self, blob_id: str) -> BinaryIO:
        """
        打开 blob 用于读取

        Args:
            blob_id: blob 引用

        Returns:
            可 seek 的二进制流，由调用方关闭

        Raises:
            ContentNotFoundError: blob 不存在
            ContentError: blob 无法打开
        """
        blob_path = self.get_blob_path(blob_id)
        try:
            return open(blob_path, "rb")
        except FileNotFoundError as e:
            raise ContentNotFoundError(blob_id) from e
        except OSError as e:
            logger.error(f"Can't open blob {blob_id} for reading: {e}")
            raise ContentError("Can't open file for reading", details={"blob_id": blob_id}) from e

    def delete(self, blob_id: str) -> bool:
        """
        删除 blob

        只用于回收刚写入、尚未被任何记录引用的 blob

        Returns:
            blob 是否存在并已删除
        """
        blob_path = self.get_blob_path(blob_id)
        try:
            blob_path.unlink()
        except FileNotFoundError:
            return False

        logger.debug(f"Deleted unreferenced blob {blob_id}")
        return True

    def exists(self, blob_id: str) -> bool:
        """检查 blob 是否存在"""
        try:
            return self.get_blob_path(blob_id).is_file()
        except ContentError:
            return False

    def get_blob_path(self, blob_id: str) -> Path:
        """
        获取 blob 的物理路径

        Raises:
            ContentError: blob_id 格式无效或解析到存储目录之外
        """
        if not self._validate_blob_id(blob_id):
            raise ContentError(f"Invalid blob id: {blob_id!r}", details={"blob_id": blob_id})

        blob_path = (self.storage_dir / blob_id).resolve()
        if blob_path.parent != self.storage_dir.resolve():
            raise ContentError("Security violation: path outside content directory")

        return blob_path

    @staticmethod
    def _validate_blob_id(blob_id: str) -> bool:
        """验证 blob_id 格式"""
        # 禁止空字符串
        if not blob_id:
            return False

        # 禁止路径分隔符
        if "/" in blob_id or "\\" in blob_id:
            return False

        # 禁止路径遍历
        if ".." in blob_id:
            return False

        return True


__all__ = [
    "ContentStore",
]
