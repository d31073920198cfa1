"""Trading account enumerations."""

from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    """Challenge phase of a prop firm account.

    Phases form a strict linear progression:
    PHASE_1 -> PHASE_2 -> FUNDED (terminal).
    """

    PHASE_1 = "PHASE_1"  # Evaluation
    PHASE_2 = "PHASE_2"  # Verification
    FUNDED = "FUNDED"  # Funded account

    @property
    def order(self) -> int:
        """Position of the phase in the progression (0-based)."""
        return _PHASE_ORDER.index(self)

    @property
    def next_phase(self) -> Phase | None:
        """Following phase, or None when already funded."""
        idx = self.order + 1
        return _PHASE_ORDER[idx] if idx < len(_PHASE_ORDER) else None

    @property
    def is_terminal(self) -> bool:
        return self.next_phase is None

    @property
    def rules_key(self) -> str:
        """Key of this phase inside a rule template ("phase1" / "phase2" / "funded")."""
        return _RULES_KEYS[self]

    @classmethod
    def parse(cls, value: str | Phase) -> Phase:
        """Parse a phase from its enum value or template key.

        Accepts "PHASE_1", "phase_1", "phase1", "Phase 1", "FUNDED", "funded".

        Raises:
            ValueError: Unknown phase.
        """
        if isinstance(value, Phase):
            return value
        normalized = str(value).strip().upper().replace(" ", "_").replace("-", "_")
        if normalized in ("PHASE1", "STEP1", "STEP_1"):
            normalized = "PHASE_1"
        elif normalized in ("PHASE2", "STEP2", "STEP_2"):
            normalized = "PHASE_2"
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown phase: {value!r}") from None


_PHASE_ORDER: tuple[Phase, ...] = (Phase.PHASE_1, Phase.PHASE_2, Phase.FUNDED)

_RULES_KEYS: dict[Phase, str] = {
    Phase.PHASE_1: "phase1",
    Phase.PHASE_2: "phase2",
    Phase.FUNDED: "funded",
}


class TradeSide(str, Enum):
    """Trade direction."""

    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: str | TradeSide) -> TradeSide:
        """Parse MT5 report spellings ("buy", "BUY", "Sell", ...).

        Raises:
            ValueError: Unknown side.
        """
        if isinstance(value, TradeSide):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown trade side: {value!r}") from None
