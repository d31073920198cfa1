"""
Prop Firm Compliance - 规则合规检查

三步评估：
1. 指标计算 (engine.account.trading_metrics)
2. 规则检查 (RuleChecker)
3. 阶段进度 (PhaseProgressEvaluator)
由 PropFirmRuleEngine 统一组装。
"""

from src.business.config.rules_config import ConfigurationError
from src.business.compliance.capacity import SafeCapacity, calc_safe_capacity, calc_target_equity
from src.business.compliance.models import (
    PhaseProgress,
    RuleEngineResult,
    RuleType,
    RuleViolation,
    Severity,
)
from src.business.compliance.phase_progress import PhaseProgressEvaluator
from src.business.compliance.rule_checker import RuleChecker
from src.business.compliance.rule_engine import PropFirmRuleEngine, evaluate

__all__ = [
    "ConfigurationError",
    "PhaseProgress",
    "PhaseProgressEvaluator",
    "PropFirmRuleEngine",
    "RuleChecker",
    "RuleEngineResult",
    "RuleType",
    "RuleViolation",
    "SafeCapacity",
    "Severity",
    "calc_safe_capacity",
    "calc_target_equity",
    "evaluate",
]
