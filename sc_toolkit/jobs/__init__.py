"""
任务模块

生成并提交 Cell Ranger 集群任务脚本
"""

from .cellranger import (
    render_job_script,
    write_job_script,
    submit_job,
    generate_cellranger_jobs
)

__all__ = [
    'render_job_script',
    'write_job_script',
    'submit_job',
    'generate_cellranger_jobs'
]
