"""Fiscal-year tax rules loading.

Rules are read from <tax_rules_dir>/<year>.yaml and validated with the
TaxRules schema. A year without its own file falls back to the newest
earlier year, so an engine answering queries for several years keeps
working before a new year's tables are published.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..config import get_tax_rules_dir
from .schemas import TaxRules

logger = logging.getLogger(__name__)


class TaxRulesError(Exception):
    """Base class for tax rules loading errors."""
    pass


class TaxRulesNotFoundError(TaxRulesError):
    """Raised when no tax rules file can serve the requested year."""
    pass


class InvalidTaxRulesError(TaxRulesError):
    """Raised when a tax rules file exists but cannot be parsed or validated."""
    pass


def available_years(rules_dir: Optional[Path] = None) -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = rules_dir or get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def resolve_rules_year(year: int, rules_dir: Optional[Path] = None) -> int:
    """Pick the rules file year serving `year`.

    Returns `year` itself when its file exists, else the newest earlier year.

    Raises:
        TaxRulesNotFoundError: If no file exists for `year` or any earlier year
    """
    rules_dir = rules_dir or get_tax_rules_dir()
    candidates = [y for y in available_years(rules_dir) if y <= year]
    if not candidates:
        raise TaxRulesNotFoundError(
            f"No tax rules for {year} or earlier in {rules_dir}"
        )
    if candidates[0] != year:
        logger.warning(f"No tax rules for {year}, using {candidates[0]} rules")
    return candidates[0]


@lru_cache(maxsize=None)
def _load_rules_file(path: Path, year: int, mtime_ns: int) -> TaxRules:
    # mtime_ns is part of the cache key so an edited file is read again
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise InvalidTaxRulesError(f"Could not parse tax rules file {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidTaxRulesError(f"Invalid tax rules file {path}: expected a mapping")

    try:
        return TaxRules.model_validate({**data, "fiscal_year": year})
    except ValidationError as e:
        raise InvalidTaxRulesError(f"Invalid tax rules file {path}: {e}") from e


def load_tax_rules(year: int) -> TaxRules:
    """Load tax rules for a fiscal year.

    Args:
        year: Fiscal year (e.g., 2026)

    Returns:
        Validated, immutable TaxRules. `fiscal_year` is the year of the
        file actually used, which is earlier than `year` on fallback.
        Cached per file until the file changes on disk.

    Raises:
        TaxRulesNotFoundError: If no rules file exists for the year or any earlier year
        InvalidTaxRulesError: If the selected rules file is malformed
    """
    rules_dir = get_tax_rules_dir()
    rules_year = resolve_rules_year(int(year), rules_dir)
    path = rules_dir / f"{rules_year}.yaml"
    return _load_rules_file(path, rules_year, path.stat().st_mtime_ns)
