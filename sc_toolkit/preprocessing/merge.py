"""
数据合并模块
"""

from functools import reduce
from typing import Iterable

import anndata as ad


def merge_datasets(datasets: Iterable[ad.AnnData]) -> ad.AnnData:
    """
    按输入顺序两两合并多个 AnnData 对象

    基因取并集（outer join），某样品中不存在的基因表达记为 0；
    各样品 var 中取值一致的列会被保留。

    参数：
    ----------
    datasets : iterable of AnnData
        待合并的对象列表，至少一个

    返回：
    ----------
    adata : AnnData
        合并后的对象
    """
    datasets = list(datasets)
    if not datasets:
        raise ValueError("没有可合并的数据集")

    return reduce(
        lambda left, right: ad.concat([left, right], join='outer', merge='same'),
        datasets
    )
