"""
Marker 基因模块

- 使用 scanpy 计算各 cluster 的 marker 基因
- 按 cluster 拆分 marker 表并导出为多 sheet 的 Excel 文件
"""

import os
import re
import pandas as pd
import scanpy as sc
from typing import Optional


# Excel 对 sheet 名的限制
MAX_SHEET_NAME_LENGTH = 31
INVALID_SHEET_CHARS = re.compile(r'[\[\]:*?/\\]')


def find_markers(
    adata: sc.AnnData,
    groupby: str = "leiden",
    method: str = "wilcoxon",
    only_pos: bool = True,
    pval_cutoff: Optional[float] = None,
    use_raw: Optional[bool] = None
) -> pd.DataFrame:
    """
    计算每个 cluster 的 marker 基因

    参数：
    ----------
    adata : sc.AnnData
        已标准化（log-normalized）且包含分组列的 AnnData 对象
    groupby : str
        obs 中的 cluster 列（默认 "leiden"）
    method : str
        检验方法，传给 sc.tl.rank_genes_groups（默认 "wilcoxon"）
    only_pos : bool
        只保留 logfoldchange > 0 的基因
    pval_cutoff : float, optional
        校正后 p 值上限
    use_raw : bool, optional
        是否使用 .raw

    返回：
    ----------
    markers : pd.DataFrame
        列包含 cluster、gene、scores、logfoldchanges、pvals、pvals_adj、pct_nz_*
    """
    sc.tl.rank_genes_groups(adata, groupby, method=method, use_raw=use_raw, pts=True)
    markers = sc.get.rank_genes_groups_df(adata, group=None, pval_cutoff=pval_cutoff)
    markers = markers.rename(columns={'group': 'cluster', 'names': 'gene'})

    if only_pos:
        markers = markers[markers['logfoldchanges'] > 0]

    return markers.reset_index(drop=True)


def _validate_sheet_names(names):
    seen = set()
    for name in names:
        if not name or len(name) > MAX_SHEET_NAME_LENGTH or INVALID_SHEET_CHARS.search(name):
            raise ValueError(f"无效的 Excel sheet 名: '{name}'")
        # Excel 中 sheet 名不区分大小写
        if name.lower() in seen:
            raise ValueError(f"sheet 名重复: '{name}'")
        seen.add(name.lower())


def export_markers(
    markers: pd.DataFrame,
    file_path: str,
    cluster_col: str = "cluster",
    all_sheet: str = "all"
) -> str:
    """
    按 cluster 拆分 marker 表并保存为 Excel

    每个 cluster 一个 sheet（按 cluster 排序），最后一个 sheet 为全部 marker。

    参数：
    ----------
    markers : pd.DataFrame
        marker 表，至少包含 cluster_col 列
    file_path : str
        输出 .xlsx 路径
    cluster_col : str
        cluster 列名（默认 "cluster"）
    all_sheet : str
        全部 marker 所在 sheet 名（默认 "all"）

    返回：
    ----------
    file_path : str
        输出文件路径
    """
    if markers is None or markers.empty:
        raise ValueError("marker 表为空，无法导出")
    if cluster_col not in markers.columns:
        raise ValueError(f"marker 表中没有列 '{cluster_col}'")

    sheets = {
        str(cluster): group
        for cluster, group in markers.groupby(cluster_col, sort=True, observed=True)
    }
    if all_sheet in sheets:
        raise ValueError(f"cluster 名与汇总 sheet 名冲突: '{all_sheet}'")
    sheets[all_sheet] = markers

    _validate_sheet_names(sheets.keys())

    os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)

    with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)

    print(f"Marker 基因已保存至: {file_path}")
    return file_path
