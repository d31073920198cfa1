"""
Compliance Formatter - 合规结果格式化器

将 RuleEngineResult 格式化为控制台报告和摘要字典。
"""

from typing import Any, Optional

from src.business.compliance.models import RuleEngineResult, RuleViolation, Severity
from src.data.models.account import Account

SEVERITY_ICONS = {
    Severity.CRITICAL: "🚨",
    Severity.WARNING: "⚠️",
}

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.WARNING: "yellow",
}


def format_violation(violation: RuleViolation) -> str:
    """单条违规的显示文本，如 "🚨 Daily loss limit exceeded: 5.10% > 5%" """
    return f"{SEVERITY_ICONS[violation.severity]} {violation.message}"


def violation_color(violation: RuleViolation) -> str:
    """违规的状态颜色 (red / yellow)"""
    return SEVERITY_COLORS[violation.severity]


class ComplianceFormatter:
    """合规结果格式化器"""

    def __init__(self, width: int = 60) -> None:
        self.width = width

    def format_text(
        self,
        result: RuleEngineResult,
        account: Optional[Account] = None,
    ) -> str:
        """格式化为多行文本报告

        Args:
            result: 评估结果
            account: 账户，提供标题信息（可选）

        Returns:
            报告文本
        """
        lines: list[str] = []

        if account is not None:
            template_name = account.template.name if account.template else "-"
            lines.append(f"📋 Account {account.login or account.account_id} | {template_name}")
            lines.append(f"   Phase: {account.current_phase.value} | Initial balance: {account.initial_balance:,.2f}")
            lines.append("-" * self.width)

        status = "✅ COMPLIANT" if result.is_compliant else "❌ NOT COMPLIANT"
        lines.append(f"📊 Status: {status}")
        lines.append("")

        m = result.metrics
        lines.append("📈 Metrics:")
        lines.append(f"   Total profit:     {m.total_profit:,.2f}")
        lines.append(f"   Today's profit:   {m.daily_profit:,.2f}")
        lines.append(f"   Best day:         {m.best_trading_day:,.2f}")
        lines.append(f"   Best trade:       {m.best_single_trade:,.2f}")
        lines.append(f"   Max drawdown:     {m.current_drawdown:.2f}%")
        lines.append(f"   Trading days:     {m.trading_days}")
        lines.append(f"   Trades:           {m.total_trades} ({m.open_trades} open)")
        lines.append(f"   Win rate:         {m.win_rate:.2f}%")
        lines.append(f"   Profit factor:    {m.profit_factor:.2f}")
        lines.append("")

        p = result.phase_progress
        lines.append("🎯 Phase progress:")
        if p.has_profit_target:
            lines.append(f"   Profit target:    {p.profit_progress:.1f}%")
        else:
            lines.append("   Profit target:    N/A")
        lines.append(f"   Days traded:      {p.days_progress}")
        if p.can_advance:
            next_label = p.next_phase.value if p.next_phase else "final phase"
            lines.append(f"   ✅ Can advance to {next_label}")
        lines.append("")

        if result.violations:
            lines.append("📋 Violations:")
            lines.append("-" * self.width)
            for v in result.violations:
                lines.append(format_violation(v))
            lines.append("-" * self.width)
        else:
            lines.append("✅ No violations")

        return "\n".join(lines)

    def format_summary(self, result: RuleEngineResult) -> dict[str, Any]:
        """格式化为摘要字典（用于推送或 JSON 输出）"""
        return {
            **result.summary,
            "status_color": "red" if result.critical_violations else ("yellow" if result.warnings else "green"),
            "violations": [
                {
                    "rule_type": v.rule_type.value,
                    "color": violation_color(v),
                    "text": format_violation(v),
                }
                for v in result.violations
            ],
        }
