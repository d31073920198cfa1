"""
Business Layer CLI - 业务层命令行工具

提供命令：
- evaluate: 评估账户规则合规性
- templates: 列出规则模板
"""

from src.business.cli.main import cli

__all__ = ["cli"]
