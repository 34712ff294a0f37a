"""
预处理模块

提供基础过滤、质控指标计算和数据合并功能
"""

from .qc import create_dataset, add_percent_feature
from .merge import merge_datasets

__all__ = [
    'create_dataset',
    'add_percent_feature',
    'merge_datasets'
]
