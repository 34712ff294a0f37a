import os

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import anndata as ad
import h5py
from scipy import io
from scipy.sparse import csr_matrix


GENES = ["MT-CO1", "MT-ND1", "GAPDH", "ACTB", "CD3E"]


def write_10x_dir(data_dir, barcodes, genes, counts):
    """写出 10X 目录格式（counts 为 细胞×基因）"""
    os.makedirs(data_dir, exist_ok=True)
    io.mmwrite(os.path.join(data_dir, "matrix.mtx"), csr_matrix(np.asarray(counts).T))
    pd.DataFrame(barcodes).to_csv(
        os.path.join(data_dir, "barcodes.tsv.gz"), sep="\t", header=False, index=False
    )
    features = pd.DataFrame({
        "id": [f"ENSG{i:011d}" for i in range(len(genes))],
        "name": genes,
        "type": "Gene Expression",
    })
    features.to_csv(
        os.path.join(data_dir, "features.tsv.gz"), sep="\t", header=False, index=False
    )


def write_10x_h5(file_path, barcodes, genes, counts):
    """写出 Cell Ranger v3 HDF5 格式（counts 为 细胞×基因）"""
    os.makedirs(os.path.dirname(file_path), exist_ok=True)
    # 按细胞压缩的 CSR 即 基因×细胞 的 CSC
    matrix = csr_matrix(np.asarray(counts))
    with h5py.File(file_path, "w") as f:
        group = f.create_group("matrix")
        group.create_dataset("barcodes", data=np.array(barcodes, dtype="S"))
        group.create_dataset("data", data=matrix.data.astype(np.int32))
        group.create_dataset("indices", data=matrix.indices.astype(np.int64))
        group.create_dataset("indptr", data=matrix.indptr.astype(np.int64))
        group.create_dataset("shape", data=np.array([len(genes), len(barcodes)], dtype=np.int32))
        features = group.create_group("features")
        features.create_dataset("id", data=np.array([f"ENSMUSG{i:011d}" for i in range(len(genes))], dtype="S"))
        features.create_dataset("name", data=np.array(genes, dtype="S"))
        features.create_dataset("feature_type", data=np.array(["Gene Expression"] * len(genes), dtype="S"))
        features.create_dataset("genome", data=np.array(["mm10"] * len(genes), dtype="S"))


@pytest.fixture
def counts():
    return np.array([
        [2, 1, 5, 3, 0],
        [0, 1, 4, 2, 1],
        [1, 0, 6, 1, 2],
        [3, 2, 2, 4, 0],
    ])


@pytest.fixture
def cellranger_base(tmp_path, counts):
    """<base>/<sample>/outs/filtered_feature_bc_matrix，包含样品 A 和 C"""
    barcodes = [f"AAACCTGAGAAACC{i}-1" for i in range(counts.shape[0])]
    for sample in ("A", "C"):
        write_10x_dir(
            tmp_path / sample / "outs" / "filtered_feature_bc_matrix",
            barcodes, GENES, counts
        )
    return tmp_path


def make_adata(counts, genes, sample, barcodes=None):
    counts = np.asarray(counts)
    if barcodes is None:
        barcodes = [f"CELL{i}-1_{sample}" for i in range(counts.shape[0])]
    adata = ad.AnnData(X=csr_matrix(counts.astype(np.float32)))
    adata.obs_names = barcodes
    adata.var_names = genes
    adata.obs["SampleName"] = sample
    return adata


@pytest.fixture
def embedded_adata(counts):
    adata = make_adata(counts, GENES, "A")
    rng = np.random.default_rng(0)
    adata.obsm["X_umap"] = rng.normal(size=(adata.n_obs, 2))
    adata.obs["leiden"] = pd.Categorical(["0", "0", "1", "1"])
    return adata
