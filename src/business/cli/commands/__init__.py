"""
CLI Commands - 命令行子命令
"""

from src.business.cli.commands.evaluate import evaluate
from src.business.cli.commands.templates import templates

__all__ = ["evaluate", "templates"]
