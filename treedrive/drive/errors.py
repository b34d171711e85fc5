"""
虚拟盘错误定义

提供统一的异常类和错误代码
"""

from typing import Optional, Dict, Any


# ===== 错误代码定义 =====

class ErrorCode:
    """标准错误代码"""

    NOT_FOUND = "NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"
    CONTENT_ERROR = "CONTENT_ERROR"


# ===== 自定义异常 =====

class DriveError(Exception):
    """
    虚拟盘异常基类

    携带结构化错误信息（错误代码和详情）
    """

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.STORE_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（供上层门面格式化响应）"""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(DriveError):
    """查找未命中"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        DriveError.__init__(self, message, code=ErrorCode.NOT_FOUND, details=details)


class RecordNotFoundError(NotFoundError):
    """
    文件记录未找到

    按 ID、路径或 父 ID + 名称 查找失败时抛出
    """

    def __init__(self, message: str, **lookup):
        super().__init__(message, details=lookup)


class StoreError(DriveError):
    """持久化调用失败（连接、约束冲突、查询错误）或结构性操作被拒绝"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        DriveError.__init__(self, message, code=ErrorCode.STORE_ERROR, details=details)


class ContentError(DriveError):
    """内容 blob 打开、读取或写入失败"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        DriveError.__init__(self, message, code=ErrorCode.CONTENT_ERROR, details=details)


class ContentNotFoundError(NotFoundError, ContentError):
    """blob 不存在"""

    def __init__(self, blob_id: str):
        DriveError.__init__(
            self,
            f"Content blob not found: {blob_id}",
            code=ErrorCode.NOT_FOUND,
            details={"blob_id": blob_id}
        )


__all__ = [
    "ErrorCode",
    "DriveError",
    "NotFoundError",
    "RecordNotFoundError",
    "StoreError",
    "ContentError",
    "ContentNotFoundError",
]
