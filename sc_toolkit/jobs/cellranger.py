"""
Cell Ranger 任务脚本生成模块

为每个样品生成 SGE/UGE 批处理脚本（cellranger count）并通过 qsub 提交
"""

import os
import logging
import subprocess
from typing import List, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


DEFAULT_JOB_CONFIG = {
    'cores': 32,
    'mem_free': '64G',
    'runtime': '24:00:00',
    'modules': ['bcl2fastq', 'cellranger'],
    'create_bam': True,
    'localmem': 128,
    'localcores': 16,
    'submit_command': 'qsub',
}


def _job_options(job_config: Optional[dict]) -> dict:
    options = dict(DEFAULT_JOB_CONFIG)
    if job_config:
        options.update(job_config)
    return options


def job_script_name(sample: str) -> str:
    """样品对应的脚本文件名"""
    return f"{sample}_cellranger_count.sh"


def render_job_script(
    sample: str,
    fastq_dir: str,
    out_dir: str,
    ref_dir: str,
    project: str,
    job_config: Optional[dict] = None
) -> str:
    """
    生成单个样品的 cellranger count 任务脚本内容

    参数：
    ----------
    sample : str
        样品名称
    fastq_dir : str
        存放各样品 FASTQ 子目录的根目录
    out_dir : str
        Cell Ranger 输出目录（任务运行前 cd 到该目录）
    ref_dir : str
        参考转录组目录
    project : str
        提交任务时使用的项目名（-P）
    job_config : dict, optional
        资源与参数配置，缺省字段使用 DEFAULT_JOB_CONFIG

    返回：
    ----------
    script : str
        脚本文本
    """
    opts = _job_options(job_config)
    sample_fastq_dir = os.path.join(fastq_dir, sample)
    create_bam = 'true' if opts['create_bam'] else 'false'
    indent = " " * 16

    lines = [
        "#!/bin/bash",
        "#$ -cwd",
        f"#$ -N {sample}_count",
        f"#$ -o {sample}_count.out",
        f"#$ -e {sample}_count.err",
        f"#$ -pe omp {opts['cores']}",
        f"#$ -l mem_free={opts['mem_free']}",
        f"#$ -l h_rt={opts['runtime']}",
        f"#$ -P {project}",
    ]
    lines += [f"module load {module}" for module in opts['modules']]
    lines += [
        f"cd {out_dir}",
        f"cellranger count --id={sample} \\",
        f"{indent}--transcriptome={ref_dir} \\",
        f"{indent}--create-bam={create_bam} \\",
        f"{indent}--fastqs={sample_fastq_dir} \\",
        f"{indent}--sample={sample} \\",
        f"{indent}--localmem={opts['localmem']} \\",
        f"{indent}--localcores={opts['localcores']}",
    ]
    return "\n".join(lines) + "\n"


def write_job_script(script: str, sample: str, script_dir: str = '.') -> str:
    """写出任务脚本（同名文件直接覆盖），返回脚本路径"""
    os.makedirs(script_dir, exist_ok=True)
    script_path = os.path.join(script_dir, job_script_name(sample))
    with open(script_path, 'w') as f:
        f.write(script)
    return script_path


def submit_job(script_path: str, submit_command: str = 'qsub'):
    """
    提交任务脚本

    不检查提交命令的返回值，任务状态由集群调度系统负责。
    提交命令无法执行时（如当前节点没有 qsub）只记录警告，脚本仍保留在磁盘上。
    """
    logger.debug(f"{submit_command} {script_path}")
    try:
        subprocess.run([submit_command, script_path])
    except OSError as e:
        logger.warning(f"任务提交失败 {script_path}: {e}")


def generate_cellranger_jobs(
    fastq_dir: str,
    out_dir: str,
    ref_dir: str,
    project: str,
    samples: List[str],
    job_config: Optional[dict] = None,
    script_dir: str = '.',
    submit: bool = True
):
    """
    为每个样品生成 cellranger count 脚本并提交

    参数：
    ----------
    fastq_dir : str
        FASTQ 根目录，每个样品一个子目录
    out_dir : str
        Cell Ranger 输出目录（不存在时自动创建）
    ref_dir : str
        参考转录组目录
    project : str
        项目名
    samples : list
        样品名称列表（按顺序处理）
    job_config : dict, optional
        资源配置（cores, mem_free, runtime, modules, localmem, localcores ...）
    script_dir : str
        脚本写出目录（默认当前目录）
    submit : bool
        是否调用提交命令；False 时只生成脚本
    """
    opts = _job_options(job_config)
    os.makedirs(out_dir, exist_ok=True)

    for sample in tqdm(samples, desc="Writing job scripts"):
        script = render_job_script(sample, fastq_dir, out_dir, ref_dir, project, opts)
        script_path = write_job_script(script, sample, script_dir)
        print(f"   ✓ 生成任务脚本: {script_path}")

        if submit:
            submit_job(script_path, opts['submit_command'])
