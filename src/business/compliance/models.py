"""
Compliance Models - 合规检查数据模型

定义规则引擎的核心数据结构：
- Severity: 违规级别（WARNING / CRITICAL）
- RuleType: 规则类型
- RuleViolation: 违规信息
- PhaseProgress: 阶段进度
- RuleEngineResult: 评估结果

All of these are created per evaluation call and never persisted by the
engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from src.data.models.enums import Phase
from src.engine.models.trading import TradingMetrics


class Severity(str, Enum):
    """违规级别"""

    WARNING = "WARNING"  # 未满足软性要求，只影响晋级
    CRITICAL = "CRITICAL"  # 触发硬性风控规则，账户不合规


class RuleType(str, Enum):
    """规则类型"""

    DAILY_LOSS = "DAILY_LOSS"  # 日亏损上限
    OVERALL_LOSS = "OVERALL_LOSS"  # 总亏损上限
    DAILY_PROTECTION = "DAILY_PROTECTION"  # 50% Daily Protection
    TRADE_PROTECTION = "TRADE_PROTECTION"  # 50% Trade Protection
    MIN_TRADING_DAYS = "MIN_TRADING_DAYS"  # 最少交易天数


@dataclass(frozen=True)
class RuleViolation:
    """违规信息

    Attributes:
        rule_type: Which rule was violated.
        severity: WARNING or CRITICAL.
        message: Human-readable description.
        current_value: Measured value (%, amount or days depending on rule).
        limit_value: Threshold the value was compared against.
        violation_time: Evaluation time the violation was detected at.
    """

    rule_type: RuleType
    severity: Severity
    message: str
    current_value: float
    limit_value: float
    violation_time: datetime

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        return {
            "ruleType": self.rule_type.value,
            "severity": self.severity.value,
            "message": self.message,
            "currentValue": self.current_value,
            "limitValue": self.limit_value,
            "violationTime": self.violation_time.isoformat(),
        }


@dataclass(frozen=True)
class PhaseProgress:
    """阶段进度

    Attributes:
        profit_progress: Total profit as % of the phase profit target,
            floored at 0. 0 when the phase has no target.
        days_progress: Trading days so far.
        can_advance: Account qualifies for the next phase.
        next_phase: Phase to advance to, only set when can_advance.
        has_profit_target: False for target-less phases (typically FUNDED),
            so presentation can show "N/A" rather than 0%.
    """

    profit_progress: float = 0.0
    days_progress: int = 0
    can_advance: bool = False
    next_phase: Optional[Phase] = None
    has_profit_target: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "profitProgress": self.profit_progress,
            "daysProgress": self.days_progress,
            "canAdvance": self.can_advance,
            "nextPhase": self.next_phase.value if self.next_phase else None,
            "hasProfitTarget": self.has_profit_target,
        }


@dataclass(frozen=True)
class RuleEngineResult:
    """规则引擎评估结果"""

    is_compliant: bool
    violations: list[RuleViolation]
    metrics: TradingMetrics
    phase_progress: PhaseProgress
    evaluated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def critical_violations(self) -> list[RuleViolation]:
        """CRITICAL 违规"""
        return [v for v in self.violations if v.severity == Severity.CRITICAL]

    @property
    def warnings(self) -> list[RuleViolation]:
        """WARNING 提示"""
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def summary(self) -> dict[str, Any]:
        """评估摘要"""
        return {
            "is_compliant": self.is_compliant,
            "evaluated_at": self.evaluated_at.isoformat(),
            "critical": len(self.critical_violations),
            "warnings": len(self.warnings),
            "can_advance": self.phase_progress.can_advance,
            "next_phase": self.phase_progress.next_phase.value if self.phase_progress.next_phase else None,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase evaluation shape used by the dashboard API."""
        return {
            "isCompliant": self.is_compliant,
            "violations": [v.to_dict() for v in self.violations],
            "metrics": self.metrics.to_dict(),
            "phaseProgress": self.phase_progress.to_dict(),
            "evaluatedAt": self.evaluated_at.isoformat(),
        }
