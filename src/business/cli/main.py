"""
CLI Main Entry Point - 命令行主入口

使用 Click 库构建命令行工具。
"""

import click

from src.business.cli.commands.evaluate import evaluate
from src.business.cli.commands.templates import templates


@click.group()
@click.version_option(version="0.1.0", prog_name="propmon")
def cli() -> None:
    """Prop firm 账户监控 - 业务层命令行工具

    提供规则合规评估、模板查询等功能。
    """
    pass


# 注册子命令
cli.add_command(evaluate)
cli.add_command(templates)


if __name__ == "__main__":
    cli()
