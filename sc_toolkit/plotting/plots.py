"""
绘图模块

绘制分组 UMAP 图和基因表达 UMAP 图（FeaturePlot），支持直接显示或保存为 PNG
"""

import os
import scanpy as sc
import matplotlib.pyplot as plt
from typing import Optional, List

from ..io.writer import save_figure


def _check_embedding(adata: sc.AnnData):
    if 'X_umap' not in adata.obsm:
        raise ValueError("adata.obsm 中没有 X_umap，请先运行 sc.tl.umap")


def show_plots(
    adata: sc.AnnData,
    groups: Optional[List[str]] = None,
    features: Optional[List[str]] = None
):
    """
    显示 UMAP 图，不写文件

    参数：
    ----------
    adata : sc.AnnData
        包含 X_umap 的 AnnData 对象
    groups : list, optional
        obs 中的分组列，每列一张 UMAP 图
    features : list, optional
        基因名，每个基因一张表达图
    """
    if not groups and not features:
        return
    _check_embedding(adata)

    for group in groups or []:
        sc.pl.umap(adata, color=group, title=f'UMAP by {group}', show=True)

    for feature in features or []:
        sc.pl.umap(adata, color=feature, title=feature, show=True)


def save_plots(
    adata: sc.AnnData,
    output_dir: str,
    groups: Optional[List[str]] = None,
    features: Optional[List[str]] = None,
    width: float = 8,
    height: float = 6,
    dpi: int = 300
) -> List[str]:
    """
    绘制并保存 UMAP 图

    文件命名：UMAP_<group>.png、FeaturePlot_<feature>.png，同名文件直接覆盖。

    参数：
    ----------
    adata : sc.AnnData
        包含 X_umap 的 AnnData 对象
    output_dir : str
        输出目录（不存在时自动创建）
    groups : list, optional
        obs 中的分组列
    features : list, optional
        基因名
    width, height : float
        图像尺寸（英寸）
    dpi : int
        分辨率

    返回：
    ----------
    paths : list
        已保存的文件路径
    """
    paths = []
    if not groups and not features:
        return paths
    _check_embedding(adata)

    os.makedirs(output_dir, exist_ok=True)

    plots = [(group, f"UMAP_{group}.png", f'UMAP by {group}') for group in groups or []]
    plots += [(feature, f"FeaturePlot_{feature}.png", feature) for feature in features or []]

    for color, file_name, title in plots:
        with plt.rc_context({'figure.figsize': (width, height)}):
            sc.pl.umap(adata, color=color, title=title, show=False)
            fig = plt.gcf()
            file_path = os.path.join(output_dir, file_name)
            save_figure(fig, file_path, dpi=dpi, size=(width, height), bbox_inches=None)
            plt.close(fig)
        paths.append(file_path)

    return paths
