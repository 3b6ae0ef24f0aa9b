"""Data validation utilities for uploaded datasets."""
from __future__ import annotations
from typing import List
from dataclasses import dataclass
import pandas as pd


@dataclass
class ValidationIssue:
    """Represents a data quality issue."""
    severity: str  # "error", "warning", "info"
    message: str
    table_name: str
    column: str | None = None


class DataValidator:
    """Validates uploaded data quality and whether it can be charted."""

    @staticmethod
    def validate_dataframe(name: str, df: pd.DataFrame) -> List[ValidationIssue]:
        """Run validation checks on a single dataframe."""
        issues: List[ValidationIssue] = []

        if df.empty:
            issues.append(ValidationIssue(
                severity="error",
                message="Table is empty (no rows)",
                table_name=name
            ))
            return issues

        for col in df.columns:
            null_pct = (df[col].isna().sum() / len(df)) * 100
            if null_pct == 100:
                issues.append(ValidationIssue(
                    severity="warning",
                    message="Column contains only null values",
                    table_name=name,
                    column=str(col)
                ))
            elif null_pct > 50:
                issues.append(ValidationIssue(
                    severity="info",
                    message=f"Column has {null_pct:.1f}% null values",
                    table_name=name,
                    column=str(col)
                ))

        dup_count = int(df.duplicated().sum())
        if dup_count > 0:
            dup_pct = (dup_count / len(df)) * 100
            issues.append(ValidationIssue(
                severity="info",
                message=f"Found {dup_count} duplicate rows ({dup_pct:.1f}%)",
                table_name=name
            ))

        unnamed_cols = [col for col in df.columns if str(col).startswith("Unnamed:")]
        if unnamed_cols:
            issues.append(ValidationIssue(
                severity="warning",
                message=f"Found {len(unnamed_cols)} unnamed columns (possibly from Excel formatting)",
                table_name=name
            ))

        # The chart uses one category column and one value column
        numeric_cols = df.select_dtypes(include="number").columns
        if len(numeric_cols) == 0:
            issues.append(ValidationIssue(
                severity="warning",
                message="No numeric column found to use as chart values",
                table_name=name
            ))
        if len(numeric_cols) == len(df.columns) and len(df.columns) > 1:
            issues.append(ValidationIssue(
                severity="info",
                message="No text column found; the first column will be used as categories",
                table_name=name
            ))

        return issues

    @staticmethod
    def format_issues_report(issues: List[ValidationIssue], limit: int = 10) -> str:
        """Render issues as plain text, most severe first, ``limit`` per severity."""
        if not issues:
            return "✅ No data quality issues detected"

        icons = {"error": "❌", "warning": "⚠️", "info": "ℹ️"}
        lines = [f"Found {len(issues)} data quality issues:"]
        for severity, icon in icons.items():
            matching = [i for i in issues if i.severity == severity]
            if not matching:
                continue
            lines.append(f"\n{icon} {severity.upper()} ({len(matching)}):")
            for issue in matching[:limit]:
                where = issue.table_name + (f".{issue.column}" if issue.column else "")
                lines.append(f"  • [{where}] {issue.message}")
            hidden = len(matching) - limit
            if hidden > 0:
                lines.append(f"  ... and {hidden} more")
        return "\n".join(lines)


__all__ = ["DataValidator", "ValidationIssue"]
