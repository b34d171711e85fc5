"""
物化路径工具测试
"""

import pytest

from treedrive.drive.paths import (
    normalize_path,
    join_path,
    descendant_prefix,
    is_descendant,
    rebase_path,
    validate_name,
)


class TestPathHelpers:
    """路径工具测试"""

    @pytest.mark.parametrize("raw, expected", [
        ("", "/"),
        ("/", "/"),
        ("docs", "/docs"),
        ("/docs/a.txt/", "/docs/a.txt"),
    ])
    def test_normalize_path(self, raw, expected):
        """测试规范化"""
        assert normalize_path(raw) == expected

    def test_join_path(self):
        """测试根目录下不产生双斜杠"""
        assert join_path("/", "docs") == "/docs"
        assert join_path("/docs", "a.txt") == "/docs/a.txt"

    def test_descendant_prefix(self):
        """测试子树前缀"""
        assert descendant_prefix("/") == "/"
        assert descendant_prefix("/docs") == "/docs/"

    def test_is_descendant(self):
        """测试子树判断"""
        assert is_descendant("/docs/a.txt", "/docs")
        assert is_descendant("/docs", "/")
        assert not is_descendant("/docs", "/docs")
        assert not is_descendant("/docsx", "/docs")
        assert not is_descendant("", "/")

    def test_rebase_path(self):
        """测试前缀替换"""
        assert rebase_path("/docs/sub/b.txt", "/docs", "/archive") == "/archive/sub/b.txt"

        with pytest.raises(ValueError):
            rebase_path("/other/b.txt", "/docs", "/archive")

    @pytest.mark.parametrize("name", ["", "a/b", "a\\b", ".", ".."])
    def test_validate_name_rejects(self, name):
        """测试非法名称"""
        with pytest.raises(ValueError):
            validate_name(name)

    def test_validate_name_accepts(self):
        """测试合法名称"""
        validate_name("a.txt")
        validate_name("..hidden")
