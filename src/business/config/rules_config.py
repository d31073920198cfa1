"""
Rules Configuration - 规则模板配置

Prop firm rule templates: per-phase thresholds for profit target, daily and
overall loss limits, trading-day requirements and simple protection
(consistency) rules.

## 模板结构 (rulesJson)

```yaml
phase1:
  profitTarget: 5             # % of account size
  profitTargetAmount: 350     # absolute amount
  maxDailyLoss: 5             # %
  maxDailyLossAmount: 350
  maxOverallLoss: 10          # %
  maxOverallLossAmount: 700
  minTradingDays: 1
  consistencyRules: false
phase2:
  ...
  consistencyRules: true
  simpleProtectionRules:
    dailyProtection: true     # 50% Daily Protection
    tradeProtection: true     # 50% Trade Protection
funded:
  profitTarget: null          # no target once funded
  ...
```

Percentages and absolute amounts are trusted as given: the amount is
expected to equal accountSize * percentage / 100 but is never recomputed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.data.models.enums import Phase


class ConfigurationError(Exception):
    """Rule configuration is missing or malformed."""

    pass


def _pick(data: dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among camelCase / snake_case keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _optional_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def _flag(value: Any) -> bool:
    """Protection flags come either as a bare bool or as {enabled: bool}."""
    if isinstance(value, dict):
        return bool(value.get("enabled", False))
    return bool(value)


@dataclass
class SimpleProtectionRules:
    """Simple protection (consistency) rules.

    Attributes:
        daily_protection: 50% Daily Protection - total profit must be at
            least twice the best day's profit.
        trade_protection: 50% Trade Protection - total profit must be at
            least twice the best single trade's profit.
    """

    daily_protection: bool = True
    trade_protection: bool = True


@dataclass
class PhaseRules:
    """Rule thresholds of one challenge phase.

    None means "not configured" for every optional field. A profit target
    or minimum-days value of 0 is treated the same as None.

    Attributes:
        max_daily_loss: Max daily loss as % of initial balance.
        max_overall_loss: Max overall loss as % of initial balance.
        max_daily_loss_amount: Max daily loss in account currency.
        max_overall_loss_amount: Max overall loss in account currency.
        profit_target: Profit target as % of account size.
        profit_target_amount: Profit target in account currency.
        min_trading_days: Minimum distinct trading days before advancing.
        max_trading_days: Maximum trading days allowed for the phase.
        consistency_rules: Enables the simple protection rules.
        simple_protection: Which protections run when consistency rules are
            enabled. None means both.
    """

    max_daily_loss: float
    max_overall_loss: float
    max_daily_loss_amount: float | None = None
    max_overall_loss_amount: float | None = None
    profit_target: float | None = None
    profit_target_amount: float | None = None
    min_trading_days: int | None = None
    max_trading_days: int | None = None
    consistency_rules: bool = False
    simple_protection: SimpleProtectionRules | None = None

    @property
    def has_profit_target(self) -> bool:
        return self.profit_target_amount is not None and self.profit_target_amount > 0

    @property
    def daily_protection_enabled(self) -> bool:
        if not self.consistency_rules:
            return False
        return self.simple_protection is None or self.simple_protection.daily_protection

    @property
    def trade_protection_enabled(self) -> bool:
        if not self.consistency_rules:
            return False
        return self.simple_protection is None or self.simple_protection.trade_protection

    @classmethod
    def from_dict(cls, data: dict[str, Any], phase_name: str = "phase") -> "PhaseRules":
        """从字典解析单个阶段的规则

        Args:
            data: Phase block of a rules template.
            phase_name: Used in error messages.

        Raises:
            ConfigurationError: Missing loss limits or non-numeric values.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Rules for {phase_name} must be a mapping, got {type(data).__name__}")

        max_daily_loss = _pick(data, "maxDailyLoss", "max_daily_loss")
        max_overall_loss = _pick(data, "maxOverallLoss", "max_overall_loss")
        if max_daily_loss is None or max_overall_loss is None:
            raise ConfigurationError(
                f"Rules for {phase_name} must define maxDailyLoss and maxOverallLoss"
            )

        # 保护规则：新格式 simpleProtectionRules，旧格式为顶层 dailyProtection/tradeProtection
        protection_data = _pick(data, "simpleProtectionRules", "simple_protection_rules", "simple_protection")
        daily = _pick(data, "dailyProtection", "daily_protection")
        trade = _pick(data, "tradeProtection", "trade_protection")
        simple_protection = None
        if isinstance(protection_data, dict):
            simple_protection = SimpleProtectionRules(
                daily_protection=_flag(_pick(protection_data, "dailyProtection", "daily_protection")),
                trade_protection=_flag(_pick(protection_data, "tradeProtection", "trade_protection")),
            )
        elif daily is not None or trade is not None:
            simple_protection = SimpleProtectionRules(
                daily_protection=_flag(daily),
                trade_protection=_flag(trade),
            )

        try:
            return cls(
                max_daily_loss=float(max_daily_loss),
                max_overall_loss=float(max_overall_loss),
                max_daily_loss_amount=_optional_float(
                    _pick(data, "maxDailyLossAmount", "max_daily_loss_amount")
                ),
                max_overall_loss_amount=_optional_float(
                    _pick(data, "maxOverallLossAmount", "max_overall_loss_amount")
                ),
                profit_target=_optional_float(_pick(data, "profitTarget", "profit_target")),
                profit_target_amount=_optional_float(
                    _pick(data, "profitTargetAmount", "profit_target_amount")
                ),
                min_trading_days=_optional_int(_pick(data, "minTradingDays", "min_trading_days")),
                max_trading_days=_optional_int(_pick(data, "maxTradingDays", "max_trading_days")),
                consistency_rules=bool(_pick(data, "consistencyRules", "consistency_rules") or False),
                simple_protection=simple_protection,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value in rules for {phase_name}: {e}") from e


@dataclass
class PropFirmRules:
    """Rule set covering all three phases."""

    phase1: PhaseRules
    phase2: PhaseRules
    funded: PhaseRules

    def for_phase(self, phase: Phase) -> PhaseRules:
        """Rules of the given phase."""
        return getattr(self, phase.rules_key)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropFirmRules":
        """从 rulesJson 字典解析三个阶段的规则

        Raises:
            ConfigurationError: A phase block is missing or invalid.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Rules template must be a mapping")

        phases: dict[str, PhaseRules] = {}
        for phase in Phase:
            block = data.get(phase.rules_key)
            if block is None:
                raise ConfigurationError(f"Rules template has no '{phase.rules_key}' block")
            phases[phase.rules_key] = PhaseRules.from_dict(block, phase.rules_key)
        return cls(**phases)


@dataclass
class PropFirmTemplate:
    """Rule template assigned to an account.

    Attributes:
        template_id: Template identifier.
        name: Display name (e.g., "PropNumberOne Challenge 7k").
        account_size: Account size the template amounts are based on.
        currency: Account currency.
        prop_firm: Name of the prop firm.
        rules: Per-phase rules.
    """

    template_id: str
    name: str
    account_size: float
    rules: PropFirmRules
    currency: str = "USD"
    prop_firm: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def rules_for(self, phase: Phase) -> PhaseRules:
        return self.rules.for_phase(phase)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropFirmTemplate":
        """从模板记录解析

        Accepts the persisted template shape (``rulesJson``, ``accountSize``,
        ``propFirm: {name: ...}``) or the YAML registry shape (``rules``,
        ``account_size``, ``prop_firm``).

        Raises:
            ConfigurationError: Missing name, size or rules, or a
                non-numeric account size.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Template must be a mapping, got {type(data).__name__}")

        name = _pick(data, "name")
        if not name:
            raise ConfigurationError("Template has no name")

        account_size = _pick(data, "accountSize", "account_size")
        if account_size is None:
            raise ConfigurationError(f"Template '{name}' has no accountSize")
        try:
            account_size = float(account_size)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Template '{name}' has invalid accountSize: {account_size!r}") from e

        rules_data = _pick(data, "rulesJson", "rules_json", "rules")
        if rules_data is None:
            raise ConfigurationError(f"Template '{name}' has no rules")

        prop_firm = _pick(data, "propFirm", "prop_firm") or ""
        if isinstance(prop_firm, dict):
            prop_firm = prop_firm.get("name", "")

        known = {
            "id", "template_id", "templateId", "name", "accountSize", "account_size",
            "rulesJson", "rules_json", "rules", "propFirm", "prop_firm", "currency",
        }

        return cls(
            template_id=str(_pick(data, "id", "template_id", "templateId") or name),
            name=str(name),
            account_size=account_size,
            rules=PropFirmRules.from_dict(rules_data),
            currency=str(_pick(data, "currency") or "USD"),
            prop_firm=str(prop_firm),
            metadata={k: v for k, v in data.items() if k not in known},
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PropFirmTemplate":
        """从 YAML 文件加载单个模板"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not data:
            raise ConfigurationError(f"Template file is empty: {path}")
        return cls.from_dict(data)
