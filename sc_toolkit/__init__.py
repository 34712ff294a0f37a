"""
单细胞RNA-seq分析辅助工具

主要功能：
- Cell Ranger 集群任务脚本生成与提交
- 按样品读取 10X 矩阵并计算质控指标
- 同源基因转换与多样品合并
- UMAP 图显示与保存
- Marker 基因导出（Excel）
- 基因检出检查
"""

__version__ = '1.0.0'

# 配置
from .config import load_config

# 任务模块
from .jobs import generate_cellranger_jobs, render_job_script

# IO模块
from .io import (
    read_matrix_dir,
    read_matrix_h5,
    load_samples,
    read_h5ad,
    save_h5ad,
    save_figure
)

# 预处理模块
from .preprocessing import create_dataset, add_percent_feature, merge_datasets

# 同源基因模块
from .orthologs import load_ortholog_table, remap_genes, merge_orthologs

# 绘图模块
from .plotting import show_plots, save_plots

# Marker模块
from .markers import find_markers, export_markers

# 分析模块
from .analysis import check_gene_presence, fetch_feature_values

__all__ = [
    # Version
    '__version__',

    # Config
    'load_config',

    # Jobs
    'generate_cellranger_jobs',
    'render_job_script',

    # IO
    'read_matrix_dir',
    'read_matrix_h5',
    'load_samples',
    'read_h5ad',
    'save_h5ad',
    'save_figure',

    # Preprocessing
    'create_dataset',
    'add_percent_feature',
    'merge_datasets',

    # Orthologs
    'load_ortholog_table',
    'remap_genes',
    'merge_orthologs',

    # Plotting
    'show_plots',
    'save_plots',

    # Markers
    'find_markers',
    'export_markers',

    # Analysis
    'check_gene_presence',
    'fetch_feature_values'
]
