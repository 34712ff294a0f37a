"""
质量控制模块

提供单细胞数据的基础过滤和质控指标计算：
- 按最少细胞数 / 最少基因数过滤
- 计算指定基因集（默认线粒体基因）的表达占比
"""

import scanpy as sc


def create_dataset(
    adata: sc.AnnData,
    min_cells: int = 3,
    min_features: int = 200
) -> sc.AnnData:
    """
    对原始矩阵做基础过滤

    先去除检出基因数少于 min_features 的细胞，再去除在少于 min_cells 个细胞中
    检出的基因。阈值为 0 时跳过对应步骤。

    参数：
    ----------
    adata : sc.AnnData
        原始 counts 矩阵（细胞×基因）
    min_cells : int
        基因至少在多少个细胞中检出（默认 3）
    min_features : int
        细胞至少检出多少个基因（默认 200）

    返回：
    ----------
    adata : sc.AnnData
        过滤后的 AnnData 对象（原地修改）
    """
    if min_features > 0:
        sc.pp.filter_cells(adata, min_genes=min_features)
    if min_cells > 0:
        sc.pp.filter_genes(adata, min_cells=min_cells)
    return adata


def add_percent_feature(adata: sc.AnnData, pattern: str = "^MT-", key: str = "mt") -> sc.AnnData:
    """
    计算每个细胞中匹配 pattern 的基因所占 counts 百分比

    结果写入 obs['pct_counts_<key>']，同时写入 n_genes_by_counts、total_counts。

    参数：
    ----------
    adata : sc.AnnData
        AnnData 对象（原地修改）
    pattern : str
        基因名正则表达式（默认 "^MT-"）
    key : str
        基因集名称，用于 var 列名和 obs 列名（默认 "mt"）
    """
    adata.var[key] = adata.var_names.str.contains(pattern, regex=True)

    sc.pp.calculate_qc_metrics(
        adata,
        qc_vars=[key],
        percent_top=None,
        log1p=False,
        inplace=True
    )
    return adata
