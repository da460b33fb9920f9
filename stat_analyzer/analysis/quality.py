"""Data quality scoring."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stat_analyzer.analysis.hypothesis import SIGNIFICANCE_LEVEL, NormalityAssessment
from stat_analyzer.analysis.outliers import OutlierReport


class QualityGrade(str, Enum):
    """Overall data quality grade."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class DataQuality:
    """Quality score (100 is best) and its grade."""

    score: float
    grade: QualityGrade

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "grade": self.grade.value}


def grade_for_score(score: float) -> QualityGrade:
    if score >= 90:
        return QualityGrade.EXCELLENT
    if score >= 70:
        return QualityGrade.GOOD
    if score >= 50:
        return QualityGrade.FAIR
    return QualityGrade.POOR


def assess_data_quality(
    missing_percentage: float,
    total_observations: int,
    outliers: Sequence[OutlierReport],
    normality: Sequence[NormalityAssessment],
) -> DataQuality:
    """Score the data from missingness, outlier rate and non-normality.

    score = 100 - 2 * missing% - outlier% - 20 * (fraction non-normal)
    """
    score = 100.0
    score -= 2 * missing_percentage

    if total_observations > 0:
        outlier_count = sum(report.count for report in outliers)
        score -= outlier_count / total_observations * 100

    if normality:
        non_normal = sum(1 for a in normality if a.p_value < SIGNIFICANCE_LEVEL)
        score -= non_normal / len(normality) * 20

    return DataQuality(score=score, grade=grade_for_score(score))
