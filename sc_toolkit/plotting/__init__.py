"""
绘图模块

提供 UMAP 分组图和基因表达图的显示与保存
"""

from .plots import show_plots, save_plots

__all__ = [
    'show_plots',
    'save_plots'
]
