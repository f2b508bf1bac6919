from __future__ import annotations

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_DUE_DAYS,
    DEFAULT_FILE_PREFIX,
    DEFAULT_INVOICE_NUMBER,
    DEFAULT_SUBJECT,
    DEFAULT_TAX_RATE,
    DEFAULT_TIMEOUT_SECONDS,
    AppConfig,
    CompanyConfig,
    InvoiceSettings,
    SourceConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/invoice.yml)
- Validate it against the bundled JSON schema
- Apply defaults (tax_rate=10, due_days=30, ...)
- Let SPREADSHEET_URL from the environment / .env override source.url
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/invoice.yml")
SOURCE_URL_ENV = "SPREADSHEET_URL"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    company_raw = data["company"]
    company = CompanyConfig(
        name=company_raw["name"],
        address=company_raw.get("address", ""),
        email=company_raw.get("email", ""),
        phone=company_raw.get("phone", ""),
        logo_url=company_raw.get("logo_url", ""),
        notes=company_raw.get("notes", ""),
        # float 経由の誤差を避けるため str から Decimal 化
        tax_rate=Decimal(str(company_raw.get("tax_rate", DEFAULT_TAX_RATE))),
    )

    source_raw = data.get("source") or {}
    # 環境変数 (.env 含む) を最優先
    url = os.getenv(SOURCE_URL_ENV) or source_raw.get("url")
    source = SourceConfig(
        url=url or None,
        timeout_seconds=float(source_raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
    )

    invoice_raw = data.get("invoice") or {}
    invoice = InvoiceSettings(
        number=invoice_raw.get("number", DEFAULT_INVOICE_NUMBER),
        due_days=invoice_raw.get("due_days", DEFAULT_DUE_DAYS),
        subject=invoice_raw.get("subject", DEFAULT_SUBJECT),
        file_prefix=invoice_raw.get("file_prefix", DEFAULT_FILE_PREFIX),
    )

    return AppConfig(
        company=company,
        source=source,
        invoice=invoice,
        output_directory=data.get("output_directory", "./out"),
    )
