"""
同源基因映射模块

将一个物种的基因名转换为另一个物种的同源基因名，并合并多个样品：
- 读取并清洗同源基因对照表（CSV）
- 按对照表重命名表达矩阵中的基因
- 按输入顺序合并所有样品
"""

import logging
import numpy as np
import pandas as pd
import scanpy as sc
from typing import Dict, List
from tqdm import tqdm

from ..io.reader import read_matrix_h5, sample_matrix_h5
from ..preprocessing.merge import merge_datasets

logger = logging.getLogger(__name__)


COLLISION_POLICIES = ('first', 'error')


def clean_ortholog_table(
    table: pd.DataFrame,
    source_col: str = "source_gene",
    target_col: str = "target_gene"
) -> pd.DataFrame:
    """
    清洗对照表：先按源基因去重（保留首次出现的行，顺序不变），再去除含缺失值的行

    只保留 source_col 和 target_col 两列。对已清洗的表重复调用结果不变。
    """
    table = table[[source_col, target_col]]
    table = table.drop_duplicates(subset=source_col, keep='first')
    table = table.dropna()
    return table.reset_index(drop=True)


def load_ortholog_table(
    csv_path: str,
    source_col: str = "source_gene",
    target_col: str = "target_gene"
) -> pd.DataFrame:
    """
    读取同源基因对照表

    参数：
    ----------
    csv_path : str
        CSV 文件路径，需包含 source_col 和 target_col 两列
    source_col : str
        源物种基因名列
    target_col : str
        目标物种基因名列

    返回：
    ----------
    table : pd.DataFrame
        清洗后的对照表
    """
    table = pd.read_csv(csv_path, dtype=str)

    missing = [col for col in (source_col, target_col) if col not in table.columns]
    if missing:
        raise ValueError(f"同源基因表缺少列 {missing}: {csv_path}")

    n_raw = len(table)
    table = clean_ortholog_table(table, source_col, target_col)
    logger.info(f"同源基因表: {n_raw:,} 行 -> 清洗后 {len(table):,} 行")
    return table


def build_lookup(
    table: pd.DataFrame,
    source_col: str = "source_gene",
    target_col: str = "target_gene"
) -> Dict[str, str]:
    """源基因名 -> 目标基因名"""
    return dict(zip(table[source_col], table[target_col]))


def remap_genes(
    adata: sc.AnnData,
    lookup: Dict[str, str],
    include_unmapped: bool = False,
    on_collision: str = 'first'
) -> sc.AnnData:
    """
    按对照表重命名基因

    查表使用原始基因名。输入中重复的基因名映射到同一目标，按 on_collision 处理。

    参数：
    ----------
    adata : sc.AnnData
        细胞×基因矩阵
    lookup : dict
        源基因名 -> 目标基因名
    include_unmapped : bool
        True：保留所有基因，未匹配的基因沿用原名；
        False：只保留成功匹配的基因
    on_collision : str
        多个基因得到同一名称时的处理方式：
        'first' 保留基因顺序中的第一个，其余丢弃；'error' 抛出 ValueError

    返回：
    ----------
    adata : sc.AnnData
        重命名后的新对象，var['source_gene'] 记录原基因名
    """
    if on_collision not in COLLISION_POLICIES:
        raise ValueError(f"on_collision 必须是 {COLLISION_POLICIES} 之一: {on_collision}")

    original = np.asarray(adata.var_names, dtype=str)
    targets = pd.Series(original).map(lookup)
    is_mapped = targets.notna().to_numpy(copy=True)

    if include_unmapped:
        keep = np.ones(len(original), dtype=bool)
        new_names = np.where(is_mapped, targets.astype(object).values, original)
    else:
        keep = is_mapped.copy()
        new_names = targets.values

    new_names = np.asarray(new_names[keep], dtype=str)
    duplicated = pd.Index(new_names).duplicated(keep='first')

    if duplicated.any():
        collided = sorted(set(new_names[duplicated]))
        if on_collision == 'error':
            raise ValueError(f"{len(collided)} 个目标基因名被多个基因映射: {collided[:10]}")
        logger.warning(
            f"{int(duplicated.sum())} 个基因与已有基因名冲突，保留首个: {collided[:10]}"
        )
        keep[np.flatnonzero(keep)[duplicated]] = False
        new_names = new_names[~duplicated]

    remapped = adata[:, keep].copy()
    remapped.var['source_gene'] = original[keep]
    remapped.var_names = pd.Index(new_names)

    logger.debug(
        f"映射成功 {int(is_mapped.sum()):,} / {len(original):,} 个基因，保留 {remapped.n_vars:,} 个"
    )
    return remapped


def merge_orthologs(
    samples: List[str],
    base_dir: str,
    ortholog_csv: str,
    include_unmapped: bool = False,
    source_col: str = "source_gene",
    target_col: str = "target_gene",
    on_collision: str = 'first'
) -> sc.AnnData:
    """
    读取多个样品的 10X HDF5 矩阵，转换为目标物种基因名后合并

    参数：
    ----------
    samples : list
        样品名称列表（合并顺序）
    base_dir : str
        Cell Ranger 输出根目录（<base>/<sample>/outs/filtered_feature_bc_matrix.h5）
    ortholog_csv : str
        同源基因对照表路径
    include_unmapped : bool
        是否保留未匹配的基因（沿用原名）
    source_col, target_col : str
        对照表中源 / 目标基因名列
    on_collision : str
        基因名冲突处理方式（'first' 或 'error'）

    返回：
    ----------
    adata : sc.AnnData
        合并后的对象，obs['SampleName'] 标记样品来源
    """
    table = load_ortholog_table(ortholog_csv, source_col, target_col)
    lookup = build_lookup(table, source_col, target_col)

    datasets = []
    for sample in tqdm(samples, desc="Mapping orthologs"):
        adata = read_matrix_h5(sample_matrix_h5(base_dir, sample), sample, make_unique=False)
        adata = remap_genes(adata, lookup, include_unmapped, on_collision)
        print(f"   ✓ {sample}: {adata.n_obs:,} 个细胞, {adata.n_vars:,} 个基因")
        datasets.append(adata)

    merged = merge_datasets(datasets)
    print(f"合并完成: {merged.n_obs:,} 个细胞, {merged.n_vars:,} 个基因")
    return merged
