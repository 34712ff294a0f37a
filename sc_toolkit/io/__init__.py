"""
IO 模块

提供数据读取和写入功能
"""

from .reader import (
    read_matrix_dir,
    read_matrix_h5,
    load_samples,
    read_h5ad,
    suffix_barcodes,
    sample_matrix_dir,
    sample_matrix_h5
)
from .writer import save_h5ad, save_figure

__all__ = [
    'read_matrix_dir',
    'read_matrix_h5',
    'load_samples',
    'read_h5ad',
    'suffix_barcodes',
    'sample_matrix_dir',
    'sample_matrix_h5',
    'save_h5ad',
    'save_figure'
]
