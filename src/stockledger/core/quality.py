"""
Data quality diagnostics for spreadsheet ingests.

Ingest never fails on a bad cell: it coerces or skips. This module
records what was coerced or skipped so the caller can see how much of
the file was actually usable.
"""

from dataclasses import dataclass, field
from typing import Callable, Any
import pandas as pd

from .parsers import parse_amount_or_none


@dataclass
class DataQualityIssue:
    """A single data quality issue found in the data."""

    column: str
    issue_type: str  # e.g., "missing", "unparseable", "unknown_owner", "unresolved_column"
    severity: str  # "critical", "warning", "info"
    count: int
    percentage: float
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""


@dataclass
class DataQualityReport:
    """Summary report of data quality for a single ingest."""

    source_name: str
    total_rows: int
    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    @property
    def warning_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_critical_issues(self) -> bool:
        return len(self.critical_issues) > 0

    def summary(self) -> dict:
        """Return a summary dict for the ingest result."""
        return {
            "source": self.source_name,
            "total_rows": self.total_rows,
            "critical": len(self.critical_issues),
            "warnings": len(self.warning_issues),
            "info": len([i for i in self.issues if i.severity == "info"]),
            "issues": [i.description for i in self.issues],
        }


class DataQualityChecker:
    """
    Runs checks over a frame of resolved (canonical-column, raw-value) rows.

    Checks available:
    - Missing values in a column
    - Cells that are present but cannot be parsed as a number
    - Values rejected by a custom validator

    Extend by adding custom checks via add_check().
    """

    def __init__(self, source_name: str):
        self.source_name = source_name
        self._checks: list[Callable[[pd.DataFrame], list[DataQualityIssue]]] = []

    def add_check(
        self, check_fn: Callable[[pd.DataFrame], list[DataQualityIssue]]
    ) -> "DataQualityChecker":
        """Add a custom check function. Returns self for chaining."""
        self._checks.append(check_fn)
        return self

    def check_missing(self, column: str, severity: str = "warning") -> "DataQualityChecker":
        """Flag rows where the column resolved to nothing."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column not in df.columns or len(df) == 0:
                return []
            missing = int(df[column].isna().sum())
            if missing == 0:
                return []
            pct = (missing / len(df)) * 100
            return [
                DataQualityIssue(
                    column=column,
                    issue_type="missing",
                    severity=severity,
                    count=missing,
                    percentage=pct,
                    description=f"{missing:,} rows without {column} ({pct:.1f}%)",
                )
            ]

        return self.add_check(check)

    def check_numeric(self, column: str, severity: str = "warning") -> "DataQualityChecker":
        """Flag cells that are filled in but do not parse as a number (they become 0)."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column not in df.columns or len(df) == 0:
                return []
            present = df[column].dropna()
            bad_mask = present.apply(lambda v: parse_amount_or_none(v) is None)
            bad = int(bad_mask.sum())
            if bad == 0:
                return []
            return [
                DataQualityIssue(
                    column=column,
                    issue_type="unparseable",
                    severity=severity,
                    count=bad,
                    percentage=(bad / len(df)) * 100,
                    sample_values=present[bad_mask].head(5).tolist(),
                    description=f"{bad:,} {column} values couldn't be parsed (read as 0)",
                )
            ]

        return self.add_check(check)

    def check_invalid_values(
        self,
        column: str,
        validator: Callable[[Any], bool],
        issue_type: str = "invalid_format",
        severity: str = "info",
    ) -> "DataQualityChecker":
        """Add a check for values a validator rejects."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column not in df.columns or len(df) == 0:
                return []
            present = df[column].dropna()
            mask = present.apply(lambda x: not validator(x))
            invalid = int(mask.sum())
            if invalid == 0:
                return []
            return [
                DataQualityIssue(
                    column=column,
                    issue_type=issue_type,
                    severity=severity,
                    count=invalid,
                    percentage=(invalid / len(df)) * 100,
                    sample_values=present[mask].head(5).tolist(),
                    description=f"{invalid:,} {column} values not recognised",
                )
            ]

        return self.add_check(check)

    def check_resolved(self, columns: list[str], severity: str = "critical") -> "DataQualityChecker":
        """Flag canonical columns that no header in the whole file resolved to."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if len(df) == 0:
                return []
            issues = []
            for column in columns:
                if column in df.columns and df[column].isna().all():
                    issues.append(
                        DataQualityIssue(
                            column=column,
                            issue_type="unresolved_column",
                            severity=severity,
                            count=len(df),
                            percentage=100.0,
                            description=f"no header matched {column}",
                        )
                    )
            return issues

        return self.add_check(check)

    def run(self, df: pd.DataFrame) -> DataQualityReport:
        """Run all checks and return a quality report."""
        all_issues = []
        for check_fn in self._checks:
            all_issues.extend(check_fn(df))

        return DataQualityReport(
            source_name=self.source_name, total_rows=len(df), issues=all_issues
        )
