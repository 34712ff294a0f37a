"""
配置模块

读取默认参数（default.yaml）并合并用户提供的 YAML 配置
"""

import os
import copy
from typing import Optional

import yaml


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), 'default.yaml')


def _deep_update(base: dict, override: dict) -> dict:
    """递归合并字典，override 中的值覆盖 base"""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[str] = None) -> dict:
    """
    加载配置

    参数：
    ----------
    config_path : str, optional
        用户 YAML 配置文件路径；为 None 时只使用默认配置

    返回：
    ----------
    config : dict
        合并后的配置字典（cellranger / qc / plots / orthologs / markers）
    """
    with open(DEFAULT_CONFIG_PATH, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)

    if config_path is None:
        return config

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError(f"配置文件格式错误（应为 YAML 映射）: {config_path}")

    unknown = set(user_config) - set(config)
    if unknown:
        raise ValueError(f"未知的配置段: {sorted(unknown)}")

    return _deep_update(copy.deepcopy(config), user_config)
