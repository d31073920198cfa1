"""
Evaluate Command - 规则合规评估命令

加载账户和交易数据，运行规则引擎，输出合规结果。
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from src.business.compliance.capacity import calc_safe_capacity
from src.business.compliance.models import RuleEngineResult
from src.business.compliance.rule_engine import PropFirmRuleEngine
from src.business.config.rules_config import ConfigurationError, PropFirmTemplate
from src.business.config.template_registry import TemplateRegistry
from src.business.notification.formatters.compliance_formatter import ComplianceFormatter
from src.data.models.account import Account
from src.data.models.trade import Trade, parse_timestamp


logger = logging.getLogger(__name__)

# 退出码
EXIT_OK = 0
EXIT_WARNINGS = 1
EXIT_CRITICAL = 2
EXIT_ERROR = 3


@click.command()
@click.option(
    "--account",
    "-a",
    "account_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="账户数据 JSON 文件路径",
)
@click.option(
    "--trades",
    "-t",
    "trades_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="交易数据 JSON 文件路径",
)
@click.option(
    "--template",
    "-T",
    "template_name",
    type=str,
    help="模板名称（覆盖账户文件中的模板）",
)
@click.option(
    "--templates-file",
    type=click.Path(exists=True, dir_okay=False),
    help="模板配置文件路径",
)
@click.option(
    "--as-of",
    type=str,
    help="评估时间 (ISO-8601)，默认当前时间",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def evaluate(
    account_path: str,
    trades_path: str,
    template_name: Optional[str],
    templates_file: Optional[str],
    as_of: Optional[str],
    output: str,
    verbose: bool,
) -> None:
    """评估账户的 prop firm 规则合规性

    \b
    退出码：
      0 合规且无提示
      1 仅有 WARNING
      2 存在 CRITICAL 违规
      3 配置或输入错误

    \b
    示例：
      propmon evaluate -a account.json -t trades.json
      propmon evaluate -a account.json -t trades.json -T "FTMO Challenge 10k" -o json
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        account_data = _load_json(account_path)
        if not isinstance(account_data, dict):
            raise ValueError(f"Account file must contain an object: {account_path}")
        registry = TemplateRegistry(templates_file) if templates_file else TemplateRegistry()
        template = _resolve_template(account_data, template_name, registry)
        account = Account.from_dict(account_data, template=template)
        trades = _load_trades(trades_path)
        evaluated_at = parse_timestamp(as_of) if as_of else None

        result = PropFirmRuleEngine().evaluate(account, trades, as_of=evaluated_at)
    except (ConfigurationError, ValueError, OSError) as e:
        logger.debug("Evaluation failed", exc_info=True)
        click.echo(f"❌ 错误: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if output == "json":
        _output_json(result, account)
    else:
        click.echo(ComplianceFormatter().format_text(result, account))

    if result.critical_violations:
        sys.exit(EXIT_CRITICAL)
    elif result.warnings:
        sys.exit(EXIT_WARNINGS)
    sys.exit(EXIT_OK)


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_trades(path: str) -> list[Trade]:
    """加载交易数据，支持列表或 {"trades": [...]}"""
    data = _load_json(path)
    if isinstance(data, dict):
        data = data.get("trades", [])
    if not isinstance(data, list):
        raise ValueError(f"Trades file must contain a list: {path}")
    trades = [Trade.from_dict(t) for t in data]
    logger.info(f"Loaded {len(trades)} trades from {Path(path).name}")
    return trades


def _resolve_template(
    account_data: dict[str, Any],
    template_name: Optional[str],
    registry: TemplateRegistry,
) -> Optional[PropFirmTemplate]:
    """解析账户模板

    优先级：命令行 --template > 账户文件内嵌模板 > 账户文件模板名称。
    都没有时返回 None，由规则引擎报告配置错误。
    """
    if template_name:
        return registry.get(template_name)

    embedded = account_data.get("propFirmTemplate") or account_data.get("template")
    if isinstance(embedded, dict):
        return PropFirmTemplate.from_dict(embedded)
    if isinstance(embedded, str):
        return registry.get(embedded)

    name = account_data.get("templateName") or account_data.get("template_name")
    if name:
        return registry.get(name)
    return None


def _output_json(result: RuleEngineResult, account: Account) -> None:
    """JSON 格式输出"""
    rules = account.template.rules_for(account.current_phase)
    capacity = calc_safe_capacity(rules, result.metrics)

    output_data = {
        "account": {
            "id": account.account_id,
            "login": account.login,
            "propFirm": account.template.prop_firm,
            "template": account.template.name,
            "currentPhase": account.current_phase.value,
        },
        "evaluation": result.to_dict(),
        "safeCapacity": {
            "daily": capacity.daily,
            "overall": capacity.overall,
        },
        "evaluatedAt": result.evaluated_at.isoformat(),
    }
    click.echo(json.dumps(output_data, indent=2, ensure_ascii=False))
