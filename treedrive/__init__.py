"""
treedrive

基于关系表物化路径的层级文件存储引擎
"""

__version__ = "0.1.0"
