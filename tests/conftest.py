"""
Pytest 配置文件

把项目根目录放到 sys.path 最前面，使 treedrive 和 config 包无需安装即可导入
"""

import sys
from pathlib import Path


def pytest_configure(config):
    """Pytest 配置钩子"""
    project_root = str(Path(__file__).parent.parent.resolve())

    if project_root not in sys.path:
        sys.path.insert(0, project_root)
