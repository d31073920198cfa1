"""
Templates Command - 规则模板命令

列出已配置的 prop firm 规则模板。
"""

import sys
from typing import Optional

import click

from src.business.config.template_registry import TemplateRegistry, TemplateRegistryError
from src.data.models.enums import Phase


@click.command()
@click.option(
    "--firm",
    "-f",
    type=str,
    help="只显示指定 prop firm 的模板",
)
@click.option(
    "--templates-file",
    type=click.Path(exists=True, dir_okay=False),
    help="模板配置文件路径",
)
def templates(firm: Optional[str], templates_file: Optional[str]) -> None:
    """列出规则模板

    \b
    示例：
      propmon templates
      propmon templates --firm FTMO
    """
    registry = TemplateRegistry(templates_file) if templates_file else TemplateRegistry()

    try:
        if firm:
            selected = registry.by_prop_firm(firm)
        else:
            selected = [registry.get(name) for name in registry.list_templates()]
    except TemplateRegistryError as e:
        click.echo(f"❌ 错误: {e}", err=True)
        sys.exit(3)

    if not selected:
        click.echo("没有匹配的模板")
        return

    click.echo(f"📋 可用模板 ({len(selected)}):")
    for template in selected:
        click.echo(f"  • {template.name} [{template.prop_firm}] {template.account_size:,.0f} {template.currency}")
        for phase in Phase:
            rules = template.rules_for(phase)
            target = f"{rules.profit_target:g}%" if rules.profit_target is not None else "-"
            days = str(rules.min_trading_days) if rules.min_trading_days else "-"
            protection = "on" if rules.consistency_rules else "off"
            click.echo(
                f"      {phase.value:<8} target {target:<5} daily {rules.max_daily_loss:g}% "
                f"overall {rules.max_overall_loss:g}% min days {days} protection {protection}"
            )
