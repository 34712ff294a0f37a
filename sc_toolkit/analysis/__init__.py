"""
分析模块

提供基因检出检查功能
"""

from .presence import fetch_feature_values, check_gene_presence

__all__ = [
    'fetch_feature_values',
    'check_gene_presence'
]
