"""Configuration paths for Verolaskuri.

Statutory tables (tax brackets, YEL rates, depreciation thresholds) are
versioned by fiscal year, one YAML file per year:

    <tax_rules_dir>/2026.yaml

Tax rules directory resolution:
1. VEROLASKURI_TAX_RULES_PATH environment variable (if set)
2. config/tax_rules/ bundled with the package
"""

import os
from pathlib import Path

APP_NAME = "verolaskuri"
TAX_RULES_ENV_VAR = "VEROLASKURI_TAX_RULES_PATH"

CURRENT_FISCAL_YEAR = 2026


def get_bundled_tax_rules_dir() -> Path:
    """Get the tax rules directory shipped with the package."""
    package_root = Path(__file__).parent.parent  # sdk -> verolaskuri
    return package_root / "config" / "tax_rules"


def get_tax_rules_dir() -> Path:
    """Get the tax rules directory path.

    Resolution order:
    1. VEROLASKURI_TAX_RULES_PATH environment variable
    2. Bundled config/tax_rules/

    Returns:
        Path to the directory holding <year>.yaml files
    """
    env_path = os.environ.get(TAX_RULES_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_bundled_tax_rules_dir()
