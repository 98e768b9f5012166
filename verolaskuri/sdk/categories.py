"""Income and expense categories for Finnish sole-trader doctors.

The table is a compiled-in constant exposed through a read-only mapping.
Lookups of unknown ids never raise: compliance checks treat an unknown
category as one that requires proof.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional

from .schemas import EntryKind


@dataclass(frozen=True)
class Category:
    """A bookkeeping category."""

    id: str
    label: str
    label_fi: str
    kind: EntryKind
    description: str
    requires_proof: bool  # Tosite required per Kirjanpitolaki
    is_depreciable: bool  # Assets above the depreciation threshold


_CATEGORY_LIST = [
    # Income
    Category("clinic_income", "Clinic Income", "Klinikan tilitys", "income",
             "Net settlement from clinic chain (Terveystalo, Mehilainen, etc.)", True, False),
    Category("other_income", "Other Income", "Muu tulo", "income",
             "Consulting, expert witness, lectures, etc.", True, False),

    # Expenses
    Category("yel", "YEL Insurance", "YEL-vakuutus", "expense",
             "Statutory entrepreneur pension insurance (deducted in personal taxation)", True, False),
    Category("potilasvakuutus", "Patient Insurance", "Potilasvakuutus", "expense",
             "Mandatory patient/malpractice insurance", True, False),
    Category("laakariliitto", "Medical Association", "Laakariliitto", "expense",
             "Finnish Medical Association membership fees", True, False),
    # Flat calculated deduction, no receipt
    Category("tyohuonevahennys", "Home Office Deduction", "Tyohuonevahennys", "expense",
             "Home office deduction for administrative work", False, False),
    Category("matkakulut", "Travel Expenses", "Matkakulut", "expense",
             "Travel between clinics, CME travel, per diems", True, False),
    Category("taydennyskoulutus", "Continuing Education", "Taydennyskoulutus", "expense",
             "CME courses, conferences, training", True, False),
    Category("ammattikirjallisuus", "Professional Literature", "Ammattikirjallisuus", "expense",
             "Duodecim, medical journals, reference books", True, False),
    Category("laitteet", "Equipment", "Laitteet ja tarvikkeet", "expense",
             "Laptop, phone, stethoscope, medical instruments (incl. non-deductible VAT). "
             "Items above EUR 1,200 must be depreciated.", True, True),
    Category("tyovaatteet", "Work Clothing", "Tyovaatteet", "expense",
             "Scrubs, lab coats, professional attire", True, False),
    Category("puhelin_netti", "Phone & Internet", "Puhelin ja netti", "expense",
             "Business share of phone and internet costs", True, False),
    Category("tilitoimisto", "Accounting Fees", "Tilitoimisto", "expense",
             "Accountant / bookkeeping service fees", True, False),
    Category("vakuutukset", "Other Insurance", "Muut vakuutukset", "expense",
             "Business liability, legal protection, etc.", True, False),
    Category("toimistotarvikkeet", "Office Supplies", "Toimistotarvikkeet", "expense",
             "Paper, pens, printer supplies, etc.", True, False),
    Category("muut_kulut", "Other Expenses", "Muut kulut", "expense",
             "Miscellaneous business expenses", True, False),
]

CATEGORIES: Mapping[str, Category] = MappingProxyType({c.id: c for c in _CATEGORY_LIST})


def get_category(category_id: str) -> Optional[Category]:
    """Look up a category, None if the id is unknown."""
    return CATEGORIES.get(category_id)


def categories_by_kind(kind: EntryKind) -> List[Category]:
    """All categories of one kind, in table order."""
    return [c for c in CATEGORIES.values() if c.kind == kind]


def requires_proof(category_id: str) -> bool:
    """Whether entries in this category need a tosite. Unknown ids do."""
    category = get_category(category_id)
    return category is None or category.requires_proof
