"""
Aggregate statistics and business insights over a record set.

Everything here is a pure function of the records passed in; results are
recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import StrEnum
from typing import Any, Iterable

from .records.models import NormalizedRecord
from .utils.geocoding.models import RegionCode

NO_TOP_REGION = "N/A"

INTERSTATE_RATE_THRESHOLD = 30.0
INVESTMENT_RATE_THRESHOLD = 70.0
INVESTMENT_SERVICE_TYPE = "Investment"
INTERNATIONAL_REGIONS = (RegionCode.SINGAPORE, RegionCode.DUBAI)


class InsightType(StrEnum):
    INFO = "info"
    POSITIVE = "positive"


@dataclass(frozen=True)
class Insight:
    """A human-readable business observation."""
    type: InsightType
    title: str
    message: str


@dataclass
class RegionStat:
    clients: int = 0
    properties: int = 0

    @property
    def total(self) -> int:
        return self.clients + self.properties


@dataclass
class AnalyticsResult:
    total_clients: int = 0
    total_properties: int = 0
    interstate_sales: int = 0
    service_types: dict[str, int] = field(default_factory=dict)
    region_stats: dict[str, RegionStat] = field(default_factory=dict)
    top_region: str = NO_TOP_REGION
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for chart/table consumers."""
        payload = asdict(self)
        payload["region_stats"] = {str(k): asdict(v) for k, v in self.region_stats.items()}
        payload["insights"] = [
            {"type": i.type.value, "title": i.title, "message": i.message}
            for i in self.insights
        ]
        return payload


def _percentage(part: int, whole: int) -> float:
    """Percentage rounded to one decimal; 0.0 when `whole` is zero."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 1)


class AnalyticsEngine:
    """
    Computes totals, distributions and insights for a record set.

    Insight rules, evaluated in order:
    1. Interstate rate (interstate sales / properties) above 30% → info
    2. Any NSW clients together with any QLD properties → positive
    3. Investment share of clients above 70% → positive
    4. Any clients based in Singapore or Dubai → info
    """

    def summarize(self, records: Iterable[NormalizedRecord]) -> AnalyticsResult:
        records = list(records)
        result = AnalyticsResult(
            total_clients=len(records),
            total_properties=sum(1 for r in records if r.property_address),
            interstate_sales=sum(1 for r in records if r.is_interstate),
        )

        for r in records:
            result.service_types[r.service_type] = result.service_types.get(r.service_type, 0) + 1

        for r in records:
            result.region_stats.setdefault(r.client_region, RegionStat()).clients += 1
            if r.property_region and r.property_region != RegionCode.UNKNOWN:
                result.region_stats.setdefault(r.property_region, RegionStat()).properties += 1

        result.top_region = self.top_region(result.region_stats)
        result.insights = self.insights(records, result)
        return result

    @staticmethod
    def top_region(region_stats: dict[str, RegionStat]) -> str:
        """Region with the most clients + properties; ties go to the first inserted."""
        top, best = NO_TOP_REGION, -1
        for region, stat in region_stats.items():
            if stat.total > best:
                top, best = str(region), stat.total
        return top

    def insights(self, records: list[NormalizedRecord], stats: AnalyticsResult) -> list[Insight]:
        insights = []

        interstate_rate = _percentage(stats.interstate_sales, stats.total_properties)
        if interstate_rate > INTERSTATE_RATE_THRESHOLD:
            insights.append(Insight(
                type=InsightType.INFO,
                title="Strong Interstate Investment",
                message=(
                    f"{interstate_rate:.1f}% of clients are investing outside their home state, "
                    "indicating strong cross-state investment appetite."
                ),
            ))

        nsw = stats.region_stats.get(RegionCode.NSW)
        qld = stats.region_stats.get(RegionCode.QLD)
        nsw_clients = nsw.clients if nsw else 0
        qld_properties = qld.properties if qld else 0
        if nsw_clients > 0 and qld_properties > 0:
            insights.append(Insight(
                type=InsightType.POSITIVE,
                title="NSW to QLD Investment Flow",
                message=(
                    f"Strong trend of NSW clients ({nsw_clients}) investing in QLD properties "
                    f"({qld_properties}), likely driven by affordability and growth potential."
                ),
            ))

        investment_rate = _percentage(stats.service_types.get(INVESTMENT_SERVICE_TYPE, 0), stats.total_clients)
        if investment_rate > INVESTMENT_RATE_THRESHOLD:
            insights.append(Insight(
                type=InsightType.POSITIVE,
                title="Investment-Focused Client Base",
                message=f"{investment_rate:.1f}% of clients are investors, showing strong investment property demand.",
            ))

        international = sum(1 for r in records if r.client_region in INTERNATIONAL_REGIONS)
        if international > 0:
            insights.append(Insight(
                type=InsightType.INFO,
                title="International Client Interest",
                message=(
                    f"{international} international clients demonstrate global appeal "
                    "of Australian property market."
                ),
            ))

        return insights
