"""
同源基因模块

提供跨物种基因名转换与样品合并功能
"""

from .mapping import (
    clean_ortholog_table,
    load_ortholog_table,
    build_lookup,
    remap_genes,
    merge_orthologs
)

__all__ = [
    'clean_ortholog_table',
    'load_ortholog_table',
    'build_lookup',
    'remap_genes',
    'merge_orthologs'
]
