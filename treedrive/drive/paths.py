"""
物化路径工具

路径拼接、子树前缀计算和名称校验
"""

from treedrive.models.drive import ROOT_PATH


def normalize_path(path: str) -> str:
    """
    规范化绝对路径

    去掉多余的首尾分隔符，空路径视为根路径

    示例:
        >>> normalize_path("docs/a.txt/")
        '/docs/a.txt'
    """
    stripped = path.strip("/")
    if not stripped:
        return ROOT_PATH
    return "/" + stripped


def join_path(parent_path: str, name: str) -> str:
    """拼接父路径与叶子名称（根目录下不产生双斜杠）"""
    return parent_path.rstrip("/") + "/" + name


def descendant_prefix(path: str) -> str:
    """
    子树前缀

    记录 R 的后代恰好是 path 以 R.path + "/" 开头的记录；
    根目录的后代是分区内所有记录
    """
    if path == ROOT_PATH:
        return ROOT_PATH
    return path + "/"


def is_descendant(path: str, ancestor: str) -> bool:
    """path 是否位于 ancestor 的子树内（不含自身）"""
    if not path or path == ancestor:
        return False
    return path.startswith(descendant_prefix(ancestor))


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """把 path 开头的 old_prefix 替换为 new_prefix"""
    if not path.startswith(old_prefix):
        raise ValueError(f"Path {path} is not under {old_prefix}")
    return new_prefix + path[len(old_prefix):]


def validate_name(name: str) -> None:
    """
    校验叶子名称

    Raises:
        ValueError: 名称为空、包含分隔符或为 "." / ".."
    """
    if not name:
        raise ValueError("Name must not be empty")

    # 禁止路径分隔符
    if "/" in name or "\\" in name:
        raise ValueError(f"Invalid name: {name!r}")

    # 禁止路径遍历
    if name in (".", ".."):
        raise ValueError(f"Invalid name: {name!r}")


__all__ = [
    "normalize_path",
    "join_path",
    "descendant_prefix",
    "is_descendant",
    "rebase_path",
    "validate_name",
]
