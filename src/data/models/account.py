"""Trading account data model.

Provides the account snapshot evaluated by the compliance engine. Phase
transitions are decided by the engine but applied by the persistence layer,
so the model itself is immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from src.data.models.enums import Phase

if TYPE_CHECKING:
    from src.business.config.rules_config import PropFirmTemplate


@dataclass(frozen=True)
class Account:
    """Prop firm trading account.

    Attributes:
        account_id: Unique identifier.
        login: Broker (MT5) login.
        initial_balance: Starting balance, fixed at account creation.
        current_phase: Challenge phase the account is in.
        template: Assigned prop firm rule template. An account without a
            template cannot be evaluated.
    """

    account_id: str
    login: str
    initial_balance: float
    current_phase: Phase = Phase.PHASE_1
    template: PropFirmTemplate | None = None

    @property
    def has_template(self) -> bool:
        return self.template is not None

    def with_template(self, template: PropFirmTemplate) -> Account:
        """Return a copy of the account with a template assigned."""
        return replace(self, template=template)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        template: PropFirmTemplate | None = None,
    ) -> Account:
        """Build an Account from a persistence record.

        When the record has no ``initialBalance`` the template's account size
        is used instead.

        Args:
            data: Account record (camelCase or snake_case keys).
            template: Already-resolved rule template, if any.

        Raises:
            ValueError: Missing id or balance, or unknown phase.
        """
        account_id = data.get("id", data.get("account_id"))
        if account_id is None:
            raise ValueError(f"Account record has no id: {data}")

        initial_balance = data.get("initialBalance", data.get("initial_balance"))
        if initial_balance is None and template is not None:
            initial_balance = template.account_size
        if initial_balance is None:
            raise ValueError(f"Account {account_id} has no initial balance")

        phase = data.get("currentPhase", data.get("current_phase", Phase.PHASE_1))

        return cls(
            account_id=str(account_id),
            login=str(data.get("login", "")),
            initial_balance=float(initial_balance),
            current_phase=Phase.parse(phase),
            template=template,
        )
