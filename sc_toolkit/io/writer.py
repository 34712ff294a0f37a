"""
结果写入模块

h5ad 数据与 UMAP 图像的保存，父目录不存在时自动创建，同名文件直接覆盖。
"""

import os
from typing import Optional, Tuple


def _ensure_parent(file_path: str):
    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)


def save_h5ad(adata, file_path: str, compression: Optional[str] = 'gzip'):
    """
    将合并或过滤后的数据集写为 h5ad

    参数：
    ----------
    adata : AnnData
        数据集（obs 中带 SampleName 列）
    file_path : str
        输出路径
    compression : str, optional
        h5ad 压缩方式，None 表示不压缩
    """
    _ensure_parent(file_path)
    adata.write_h5ad(file_path, compression=compression)
    print(f"✓ 已写出 {adata.n_obs:,} 个细胞 × {adata.n_vars:,} 个基因: {file_path}")


def save_figure(
    fig,
    file_path: str,
    dpi: int = 300,
    size: Optional[Tuple[float, float]] = None,
    bbox_inches: Optional[str] = 'tight'
):
    """
    保存 matplotlib 图形

    参数：
    ----------
    fig : matplotlib.figure.Figure
        图形对象
    file_path : str
        输出路径，格式由扩展名决定
    dpi : int
        分辨率
    size : tuple, optional
        (宽, 高) 英寸；给出时先调整图形尺寸
    bbox_inches : str, optional
        'tight' 会按内容裁剪画布；要求像素尺寸等于 size × dpi 时传 None
    """
    _ensure_parent(file_path)
    if size is not None:
        fig.set_size_inches(*size)
    fig.savefig(file_path, dpi=dpi, bbox_inches=bbox_inches)
    print(f"✓ 图像: {file_path}")
