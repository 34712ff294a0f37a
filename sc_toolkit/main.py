"""
主入口程序

单细胞RNA-seq辅助工具命令行接口
"""

import os
import sys
import logging
import argparse
import traceback
import pandas as pd

from sc_toolkit.config import load_config
from sc_toolkit.jobs import generate_cellranger_jobs
from sc_toolkit.io import load_samples, read_h5ad, save_h5ad
from sc_toolkit.preprocessing import merge_datasets
from sc_toolkit.orthologs import merge_orthologs
from sc_toolkit.plotting import save_plots
from sc_toolkit.markers import find_markers, export_markers
from sc_toolkit.analysis import check_gene_presence


def get_args(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="单细胞RNA-seq分析辅助工具",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--config", default=None,
                        help="YAML 配置文件（覆盖默认参数）")
    parser.add_argument("--verbose", action='store_true',
                        help="输出调试日志")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Cell Ranger 任务
    p = subparsers.add_parser("cellranger", help="生成并提交 cellranger count 任务",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--fastq_dir", required=True, help="FASTQ 根目录（每个样品一个子目录）")
    p.add_argument("--out_dir", required=True, help="Cell Ranger 输出目录")
    p.add_argument("--ref_dir", required=True, help="参考转录组目录")
    p.add_argument("--project", required=True, help="集群项目名")
    p.add_argument("--samples", nargs='+', required=True, help="样品名称")
    p.add_argument("--script_dir", default=".", help="任务脚本写出目录")
    p.add_argument("--no_submit", action='store_true', help="只生成脚本，不提交")

    # 读取样品
    p = subparsers.add_parser("load", help="读取 10X 矩阵并计算质控指标",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--base_dir", required=True, help="Cell Ranger 输出根目录")
    p.add_argument("--samples", nargs='+', required=True, help="样品名称")
    p.add_argument("--output", required=True, help="合并后的 h5ad 输出路径")
    p.add_argument("--mt_pattern", default=None, help="线粒体基因正则")
    p.add_argument("--min_cells", type=int, default=None, help="基因最少检出细胞数")
    p.add_argument("--min_features", type=int, default=None, help="细胞最少检出基因数")

    # 同源基因
    p = subparsers.add_parser("orthologs", help="同源基因转换并合并样品",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--base_dir", required=True, help="Cell Ranger 输出根目录")
    p.add_argument("--samples", nargs='+', required=True, help="样品名称")
    p.add_argument("--ortholog_csv", required=True, help="同源基因对照表")
    p.add_argument("--output", required=True, help="h5ad 输出路径")
    p.add_argument("--include_unmapped", action=argparse.BooleanOptionalAction, default=None,
                   help="保留未匹配的基因")
    p.add_argument("--source_col", default=None, help="源基因列名")
    p.add_argument("--target_col", default=None, help="目标基因列名")
    p.add_argument("--on_collision", choices=['first', 'error'], default=None,
                   help="基因名冲突处理方式")

    # 绘图
    p = subparsers.add_parser("plots", help="保存 UMAP 图",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--input", required=True, help="包含 X_umap 的 h5ad 文件")
    p.add_argument("--output_dir", required=True, help="图片输出目录")
    p.add_argument("--groups", nargs='*', default=None, help="obs 分组列")
    p.add_argument("--features", nargs='*', default=None, help="基因名")
    p.add_argument("--width", type=float, default=None, help="图宽（英寸）")
    p.add_argument("--height", type=float, default=None, help="图高（英寸）")
    p.add_argument("--dpi", type=int, default=None, help="分辨率")

    # Marker
    p = subparsers.add_parser("markers", help="计算并导出 marker 基因",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="h5ad 文件（计算 marker）")
    source.add_argument("--markers_csv", help="已有的 marker 表 CSV")
    p.add_argument("--output", required=True, help="xlsx 输出路径")
    p.add_argument("--groupby", default=None, help="cluster 列名")
    p.add_argument("--method", default=None, help="rank_genes_groups 检验方法")

    # 基因检出
    p = subparsers.add_parser("gene", help="检查基因是否检出",
                              formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p.add_argument("--input", required=True, help="h5ad 文件")
    p.add_argument("--gene", required=True, help="基因名")

    return parser.parse_args(argv)


def _pick(value, default):
    return default if value is None else value


def run_cellranger(args, config):
    cfg = config['cellranger']
    generate_cellranger_jobs(
        fastq_dir=args.fastq_dir,
        out_dir=args.out_dir,
        ref_dir=args.ref_dir,
        project=args.project,
        samples=args.samples,
        job_config=cfg,
        script_dir=args.script_dir,
        submit=not args.no_submit
    )


def run_load(args, config):
    cfg = config['qc']
    datasets = load_samples(
        args.base_dir,
        args.samples,
        mt_pattern=_pick(args.mt_pattern, cfg['mt_pattern']),
        min_cells=_pick(args.min_cells, cfg['min_cells']),
        min_features=_pick(args.min_features, cfg['min_features'])
    )
    if not datasets:
        raise FileNotFoundError(f"在 {args.base_dir} 中没有找到任何样品矩阵")

    adata = merge_datasets(datasets.values())
    save_h5ad(adata, args.output)

    print(f"\n✅ 读取完成:")
    print(f"  样品数: {len(datasets)} / {len(args.samples)}")
    print(f"  细胞数: {adata.n_obs:,}")
    print(f"  基因数: {adata.n_vars:,}")


def run_orthologs(args, config):
    cfg = config['orthologs']
    adata = merge_orthologs(
        args.samples,
        args.base_dir,
        args.ortholog_csv,
        include_unmapped=_pick(args.include_unmapped, cfg['include_unmapped']),
        source_col=_pick(args.source_col, cfg['source_col']),
        target_col=_pick(args.target_col, cfg['target_col']),
        on_collision=_pick(args.on_collision, cfg['on_collision'])
    )
    save_h5ad(adata, args.output)


def run_plots(args, config):
    cfg = config['plots']
    adata = read_h5ad(args.input)
    paths = save_plots(
        adata,
        args.output_dir,
        groups=args.groups,
        features=args.features,
        width=_pick(args.width, cfg['width']),
        height=_pick(args.height, cfg['height']),
        dpi=_pick(args.dpi, cfg['dpi'])
    )
    print(f"\n✅ 共保存 {len(paths)} 张图")


def run_markers(args, config):
    cfg = config['markers']
    if args.input:
        adata = read_h5ad(args.input)
        markers = find_markers(
            adata,
            groupby=_pick(args.groupby, cfg['groupby']),
            method=_pick(args.method, cfg['method']),
            only_pos=cfg['only_pos']
        )
    else:
        markers = pd.read_csv(args.markers_csv)

    export_markers(markers, args.output,
                   cluster_col=cfg['cluster_col'],
                   all_sheet=cfg['all_sheet'])


def run_gene(args, config):
    adata = read_h5ad(args.input)
    check_gene_presence(adata, args.gene)


COMMANDS = {
    'cellranger': run_cellranger,
    'load': run_load,
    'orthologs': run_orthologs,
    'plots': run_plots,
    'markers': run_markers,
    'gene': run_gene,
}


def main(argv=None):
    """
    命令行入口
    """
    args = get_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config)
        if args.config:
            print(f"📋 使用配置文件: {os.path.abspath(args.config)}")

        COMMANDS[args.command](args, config)

    except Exception as e:
        print(f"\n❌ {args.command} 失败: {str(e)}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
