"""
Marker 模块

提供 marker 基因计算与 Excel 导出功能
"""

from .export import find_markers, export_markers

__all__ = [
    'find_markers',
    'export_markers'
]
