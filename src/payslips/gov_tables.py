from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

DEFAULT_TABLES_PATH = Path(__file__).resolve().parent / "data" / "gov_tables"


@dataclass
class SSSBracket:
    ord: int
    range_from: float
    range_to: Optional[float]
    msc: float
    employee_contrib: float
    employer_contrib: float


@dataclass
class PhilHealthBracket:
    ord: int
    min: float
    max: Optional[float]
    rate: float
    employee_contrib: Optional[float] = None  # fixed share; None means basis * rate / 2
    employer_contrib: Optional[float] = None


@dataclass
class HDMFBracket:
    ord: int
    min: float
    max: Optional[float]
    reference: float
    employee_rate: float
    employer_rate: float


@dataclass
class TaxBracket:
    bracket: int
    min: float
    max: Optional[float]
    fixed_tax: float
    rate_on_excess: float


def _contains(low: float, high: Optional[float], value: float) -> bool:
    return value >= low and (high is None or value <= high)


def _find_with_ceiling(brackets, low_attr: str, high_attr: str, value: float):
    """Return the bracket containing value; values past the last range use the top bracket."""
    for bracket in brackets:
        if _contains(getattr(bracket, low_attr), getattr(bracket, high_attr), value):
            return bracket
    if brackets and value > getattr(brackets[-1], low_attr):
        return brackets[-1]
    return None


class GovTable:
    def __init__(
        self,
        version: str,
        effective_from: str,
        sss: List[SSSBracket],
        philhealth: List[PhilHealthBracket],
        hdmf: List[HDMFBracket],
        bir: List[TaxBracket],
    ):
        self.version = version
        self.effective_from = effective_from
        self.sss = sorted(sss, key=lambda b: b.ord)
        self.philhealth = sorted(philhealth, key=lambda b: b.ord)
        self.hdmf = sorted(hdmf, key=lambda b: b.ord)
        self.bir = sorted(bir, key=lambda b: b.bracket)

    def sss_bracket(self, compensation: float) -> Optional[SSSBracket]:
        return _find_with_ceiling(self.sss, "range_from", "range_to", round(compensation, 2))

    def philhealth_bracket(self, salary: float) -> Optional[PhilHealthBracket]:
        return _find_with_ceiling(self.philhealth, "min", "max", round(salary, 2))

    def hdmf_bracket(self, compensation: float) -> Optional[HDMFBracket]:
        return _find_with_ceiling(self.hdmf, "min", "max", round(compensation, 2))

    def tax_bracket(self, taxable_income: float) -> Optional[TaxBracket]:
        # No ceiling here: income outside every range must be reported, not guessed.
        value = round(taxable_income, 2)
        for bracket in self.bir:
            if _contains(bracket.min, bracket.max, value):
                return bracket
        return None


class GovTableRepository:
    def __init__(self, base_path: Path = DEFAULT_TABLES_PATH):
        self.base_path = base_path

    def available_versions(self) -> List[str]:
        return sorted([p.stem for p in self.base_path.glob("*.json")])

    def load(self, version: str) -> GovTable:
        file_path = self.base_path / f"{version}.json"
        if not file_path.exists():
            raise FileNotFoundError(f"Government table version {version} not found at {file_path}")
        with file_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return GovTable(
            version=data["version"],
            effective_from=data.get("effective_from", ""),
            sss=[SSSBracket(**row) for row in data["sss"]],
            philhealth=[PhilHealthBracket(**row) for row in data["philhealth"]],
            hdmf=[HDMFBracket(**row) for row in data["hdmf"]],
            bir=[TaxBracket(**row) for row in data["bir"]],
        )
