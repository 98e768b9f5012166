"""Loading and validating input records.

Records come from the caller's storage as plain rows (dicts), usually
exported to a JSON or YAML file. This module turns them into validated
schema objects. Every shape problem (bad date, non-positive amount,
unknown or wrongly typed category) is reported as InvalidInputError so
callers have a single error kind to translate into a validation failure.

File format: a list of objects, or an object with a "records" list.
Files ending in .yaml/.yml are read as YAML, everything else as JSON.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .categories import get_category
from .schemas import BankRecord, InvalidInputError, LedgerEntry, PrepaymentInstallment, TaxCard

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_file(path: Path) -> Any:
    if not path.exists():
        raise InvalidInputError(f"File not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                return yaml.safe_load(f)
            return json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            raise InvalidInputError(f"Could not parse {path.name}: {e}") from e


def load_rows(path: Path) -> List[Dict[str, Any]]:
    """Read a list of record rows from a JSON or YAML file."""
    data = _read_file(Path(path))
    if isinstance(data, dict) and "records" in data:
        data = data["records"]
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise InvalidInputError(f"{Path(path).name}: expected a list of objects")
    logger.debug(f"Loaded {len(data)} rows from {path}")
    return data


def load_object(path: Path) -> Dict[str, Any]:
    """Read a single object from a JSON or YAML file."""
    data = _read_file(Path(path))
    if not isinstance(data, dict):
        raise InvalidInputError(f"{Path(path).name}: expected an object")
    return data


def _format_validation_error(index: int, e: ValidationError) -> List[str]:
    problems = []
    for err in e.errors():
        field = ".".join(str(p) for p in err["loc"]) or "(record)"
        problems.append(f"record {index}: {field}: {err['msg']}")
    return problems


def _parse_rows(rows: List[Dict[str, Any]], model: Type[ModelT], label: str) -> List[ModelT]:
    parsed = []
    problems = []
    for index, row in enumerate(rows):
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            problems.extend(_format_validation_error(index, e))
    if problems:
        raise InvalidInputError(f"Invalid {label}", problems)
    return parsed


def category_problems(entry: LedgerEntry) -> List[str]:
    """Problems with an entry's category: unknown id or wrong kind."""
    category = get_category(entry.category)
    if category is None:
        return [f"entry {entry.id}: unknown category '{entry.category}'"]
    if category.kind != entry.kind:
        return [f"entry {entry.id}: category '{entry.category}' is for {category.kind}, not {entry.kind}"]
    return []


def parse_ledger_entries(rows: List[Dict[str, Any]], strict: bool = True) -> List[LedgerEntry]:
    """Validate ledger entry rows.

    Args:
        rows: Row dicts
        strict: Also require every category to exist and match the entry kind

    Raises:
        InvalidInputError: Listing every problem found
    """
    entries = _parse_rows(rows, LedgerEntry, "ledger entries")
    if strict:
        problems = [p for entry in entries for p in category_problems(entry)]
        if problems:
            raise InvalidInputError("Invalid ledger entries", problems)
    return entries


def parse_bank_records(rows: List[Dict[str, Any]]) -> List[BankRecord]:
    """Validate bank record rows."""
    return _parse_rows(rows, BankRecord, "bank records")


def parse_installments(rows: List[Dict[str, Any]]) -> List[PrepaymentInstallment]:
    """Validate prepayment installment rows."""
    return _parse_rows(rows, PrepaymentInstallment, "installments")


def parse_tax_card(row: Dict[str, Any]) -> TaxCard:
    """Validate a tax card object."""
    return _parse_rows([row], TaxCard, "tax card")[0]
