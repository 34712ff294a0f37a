"""
数据读取模块

提供单细胞数据读取功能：
- 10X 目录格式（matrix.mtx / barcodes.tsv / features.tsv，支持 .gz）
- 10X HDF5 格式（filtered_feature_bc_matrix.h5）
- 按样品名批量读取并生成过滤后的 AnnData 对象
"""

import os
import logging
import scanpy as sc
import pandas as pd
from scipy import io
from scipy.sparse import csr_matrix
from typing import Dict, List
from tqdm import tqdm

from ..preprocessing.qc import create_dataset, add_percent_feature

logger = logging.getLogger(__name__)


MATRIX_DIR_NAME = os.path.join("outs", "filtered_feature_bc_matrix")
MATRIX_H5_NAME = os.path.join("outs", "filtered_feature_bc_matrix.h5")


def sample_matrix_dir(base_dir: str, sample: str) -> str:
    """样品的 10X 矩阵目录：<base>/<sample>/outs/filtered_feature_bc_matrix"""
    return os.path.join(base_dir, sample, MATRIX_DIR_NAME)


def sample_matrix_h5(base_dir: str, sample: str) -> str:
    """样品的 10X HDF5 文件：<base>/<sample>/outs/filtered_feature_bc_matrix.h5"""
    return os.path.join(base_dir, sample, MATRIX_H5_NAME)


def suffix_barcodes(barcodes, sample_id: str) -> list:
    """给细胞条码加样品后缀（<barcode>_<sample>），避免多样品合并时重名"""
    return [f"{barcode}_{sample_id}" for barcode in barcodes]


def read_matrix_dir(data_dir: str, sample_id: str) -> sc.AnnData:
    """
    从 10X 输出目录读取单细胞矩阵数据，生成 AnnData 对象。

    参数：
    ----------
    data_dir : str
        存放 matrix.mtx(.gz)、barcodes.tsv(.gz)、features.tsv(.gz) 的目录路径
    sample_id : str
        样品 ID，作为细胞条码后缀并写入 obs['SampleName']

    返回：
    ----------
    adata : AnnData
        细胞×基因稀疏矩阵；var_names 为基因名（symbol），var['gene_ids'] 为基因 ID
    """
    # 自动查找三个文件（支持压缩文件）
    def find_file(name_starts):
        for fn in sorted(os.listdir(data_dir)):
            if fn.startswith(name_starts) and fn.endswith((".tsv", ".tsv.gz", ".mtx", ".mtx.gz")):
                return os.path.join(data_dir, fn)
        raise FileNotFoundError(f"未找到 {name_starts} 文件，请检查路径：{data_dir}")

    matrix_path = find_file("matrix")
    barcodes_path = find_file("barcodes")
    try:
        features_path = find_file("features")
    except FileNotFoundError:
        # 旧版 Cell Ranger 输出为 genes.tsv
        features_path = find_file("genes")

    matrix = io.mmread(matrix_path)
    barcodes = pd.read_csv(barcodes_path, header=None, sep='\t')
    features = pd.read_csv(features_path, header=None, sep='\t')

    # 转置为细胞×基因矩阵并转换为稀疏格式
    adata = sc.AnnData(X=csr_matrix(matrix.T))
    adata.obs_names = suffix_barcodes(barcodes[0].values, sample_id)

    # 第二列为基因名时优先使用基因名
    name_col = 1 if features.shape[1] > 1 else 0
    adata.var_names = features[name_col].astype(str).values
    adata.var['gene_ids'] = features[0].astype(str).values
    adata.var_names_make_unique()

    adata.obs["SampleName"] = sample_id

    return adata


def read_matrix_h5(file_path: str, sample_id: str, make_unique: bool = True) -> sc.AnnData:
    """
    读取 10X HDF5 格式矩阵

    参数：
    ----------
    file_path : str
        filtered_feature_bc_matrix.h5 文件路径
    sample_id : str
        样品 ID
    make_unique : bool
        是否对重复基因名添加 -1、-2 后缀；同源转换前需保留原始基因名时传 False

    返回：
    ----------
    adata : AnnData
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"未找到矩阵文件：{file_path}")

    adata = sc.read_10x_h5(file_path)
    if make_unique:
        adata.var_names_make_unique()
    adata.obs_names = suffix_barcodes(adata.obs_names, sample_id)
    adata.obs["SampleName"] = sample_id
    return adata


def load_samples(
    base_dir: str,
    samples: List[str],
    mt_pattern: str = "^MT-",
    min_cells: int = 3,
    min_features: int = 200
) -> Dict[str, sc.AnnData]:
    """
    按样品名批量读取 10X 矩阵

    参数：
    ----------
    base_dir : str
        Cell Ranger 输出根目录（<base>/<sample>/outs/filtered_feature_bc_matrix）
    samples : list
        样品名称列表
    mt_pattern : str
        线粒体基因名正则（默认 "^MT-"，小鼠为 "^mt-"）
    min_cells : int
        基因至少在多少个细胞中检出才保留
    min_features : int
        细胞至少检出多少个基因才保留

    返回：
    ----------
    datasets : dict
        {样品名: AnnData}，顺序与输入一致；矩阵目录不存在的样品被跳过
    """
    datasets = {}

    for sample in tqdm(samples, desc="Reading samples"):
        if sample in datasets:
            continue

        data_dir = sample_matrix_dir(base_dir, sample)
        if not os.path.isdir(data_dir):
            logger.warning(f"样品 {sample} 的矩阵目录不存在，已跳过: {data_dir}")
            continue

        adata = read_matrix_dir(data_dir, sample)
        adata = create_dataset(adata, min_cells=min_cells, min_features=min_features)
        add_percent_feature(adata, mt_pattern, key='mt')

        print(f"   ✓ {sample}: {adata.n_obs:,} 个细胞, {adata.n_vars:,} 个基因")
        datasets[sample] = adata

    return datasets


def read_h5ad(file_path: str) -> sc.AnnData:
    """
    读取之前由 load / orthologs 命令写出的 h5ad

    参数：
    ----------
    file_path : str
        h5ad 路径

    返回：
    ----------
    adata : AnnData
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"未找到 h5ad 文件：{file_path}")

    adata = sc.read_h5ad(file_path)
    print(f"读取 {file_path}: {adata.n_obs:,} 个细胞, {adata.n_vars:,} 个基因")
    return adata
