"""
基因检出模块

检查某个基因是否存在于数据中，并统计表达该基因的细胞数
"""

import numpy as np
import scanpy as sc
from typing import Optional


def fetch_feature_values(adata: sc.AnnData, gene: str) -> np.ndarray:
    """返回每个细胞中该基因的表达值（一维数组）"""
    return sc.get.obs_df(adata, keys=[gene])[gene].to_numpy()


def check_gene_presence(adata: sc.AnnData, gene: str) -> Optional[int]:
    """
    检查基因是否存在并统计表达细胞数

    参数：
    ----------
    adata : sc.AnnData
        AnnData 对象
    gene : str
        基因名（与 var_names 匹配）

    返回：
    ----------
    n_expressing : int or None
        表达量 > 0 的细胞数；基因不存在时返回 None
    """
    if gene not in adata.var_names:
        print(f"✗ 未找到基因 {gene}")
        return None

    print(f"✓ 基因 {gene} 存在于数据中")

    values = fetch_feature_values(adata, gene)
    n_expressing = int(np.sum(values > 0))

    print(f"   {n_expressing:,} / {adata.n_obs:,} 个细胞表达 {gene}")
    return n_expressing
