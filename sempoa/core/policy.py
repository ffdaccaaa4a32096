from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_POLICY_PATH = Path(__file__).resolve().parent.parent / "data" / "policy.yaml"


@dataclass(frozen=True)
class MasteryPolicy:
    """Completion threshold and unlock switches shared by the whole engine."""

    min_attempts: int = 10
    mastery_ratio: float = 0.8
    gate_mixed_operation: bool = False
    unlock_all: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.min_attempts, bool) or not isinstance(self.min_attempts, int) or self.min_attempts < 1:
            raise ValueError(f"min_attempts must be a positive integer, got {self.min_attempts!r}")
        if isinstance(self.mastery_ratio, bool) or not isinstance(self.mastery_ratio, (int, float)):
            raise ValueError(f"mastery_ratio must be a number, got {self.mastery_ratio!r}")
        if not 0.0 <= float(self.mastery_ratio) <= 1.0:
            raise ValueError(f"mastery_ratio must be between 0 and 1, got {self.mastery_ratio!r}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "MasteryPolicy":
        """Read the policy YAML, then apply SEMPOA_UNLOCK_ALL / SEMPOA_GATE_MIXED overrides."""
        policy_path = path or DEFAULT_POLICY_PATH
        if not policy_path.exists():
            raise FileNotFoundError(f"Policy file not found: {policy_path}")

        raw = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"{policy_path.name}: expected a YAML mapping")

        known = {"min_attempts", "mastery_ratio", "gate_mixed_operation", "unlock_all"}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"{policy_path.name}: unknown keys {', '.join(map(str, unknown))}")

        for flag in ("gate_mixed_operation", "unlock_all"):
            if flag in raw and not isinstance(raw[flag], bool):
                raise ValueError(f"{policy_path.name}: '{flag}' must be true or false")

        try:
            policy = cls(**raw)
        except ValueError as e:
            raise ValueError(f"{policy_path.name}: {e}") from e
        return policy.with_env_overrides()

    def with_env_overrides(self) -> "MasteryPolicy":
        policy = self
        if os.environ.get("SEMPOA_UNLOCK_ALL") == "1":
            policy = replace(policy, unlock_all=True)
        if os.environ.get("SEMPOA_GATE_MIXED") == "1":
            policy = replace(policy, gate_mixed_operation=True)
        return policy
