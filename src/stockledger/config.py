"""
Pipeline configuration.

Every marker list and policy constant lives here so that a new shop's
exports can be handled by passing different settings rather than by
editing the ingest code.

Usage:
    settings = PipelineSettings()                       # defaults
    settings = PipelineSettings.model_validate(mapping) # from a dict / YAML
    settings = PipelineSettings.from_env()              # STOCKLEDGER_* vars
"""

import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field


class AnalyzerSettings(BaseModel):
    """Inventory-control policy constants."""

    lookback_days: int = Field(default=90, gt=0, description="Velocity window in days")
    lead_time_days: int = 21
    safety_days_high_turnover: int = 14
    safety_days_standard: int = 7
    high_turnover_roi: float = Field(
        default=50.0, description="ROI% above which an item is high-turnover"
    )

    # Soldering tips and similar consumables burn out and must never run dry
    fast_consumable_markers: tuple[str, ...] = ("жало", "жала", "tip")
    fast_consumable_min_rop: int = 35

    horizon_high_turnover_days: int = 75
    horizon_expensive_days: int = 30
    horizon_standard_days: int = 45
    expensive_buying_price: float = 1500.0

    default_order_high_turnover: int = 30
    default_order_standard: int = 5

    top_n: int = 10


class PipelineSettings(BaseModel):
    """Settings shared by the ingest, attribution and analysis stages."""

    # Owner-tag markers, matched as case-insensitive substrings, Mine first
    mine_markers: tuple[str, ...] = ("богдан", "mine", "мій", "моє", "мое", "моя")
    other_markers: tuple[str, ...] = ("отец", "папа", "батько", "батька", "father", "dad")

    delivered_terms: tuple[str, ...] = (
        "доставлен",
        "выполнен",
        "виконан",
        "delivered",
        "completed",
    )
    items_sheet_markers: tuple[str, ...] = ("позици", "позиці", "items")

    default_category: str = "Warehouse"
    ledger_mode: Literal["replace", "append"] = "replace"

    analyzer: AnalyzerSettings = Field(default_factory=AnalyzerSettings)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, prefix: str = "STOCKLEDGER_"
    ) -> "PipelineSettings":
        """
        Build settings from environment variables.

        Top-level fields map to ``STOCKLEDGER_<FIELD>``; analyzer fields to
        ``STOCKLEDGER_ANALYZER__<FIELD>``. Marker lists are comma-separated.
        """
        environ = os.environ if environ is None else environ
        raw: dict = {}
        analyzer: dict = {}

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):].lower()
            if name.startswith("analyzer__"):
                field_name = name[len("analyzer__"):]
                if field_name in AnalyzerSettings.model_fields:
                    analyzer[field_name] = _env_value(AnalyzerSettings, field_name, value)
            elif name in cls.model_fields and name != "analyzer":
                raw[name] = _env_value(cls, name, value)

        if analyzer:
            raw["analyzer"] = analyzer
        return cls.model_validate(raw)


def _env_value(model: type[BaseModel], field_name: str, value: str):
    """Split comma-separated values for tuple fields; pydantic coerces the rest."""
    annotation = model.model_fields[field_name].annotation
    if getattr(annotation, "__origin__", None) is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return value
