from __future__ import annotations

import pytest

from property_dashboard.analytics import AnalyticsEngine, InsightType, RegionStat
from property_dashboard.records import NormalizedRecord
from property_dashboard.records.models import is_interstate
from property_dashboard.utils.geocoding import RegionCode


def _record(client_region=RegionCode.UNKNOWN, property_region=None, service_type="Home", name="Client"):
    has_property = property_region is not None
    property_region = property_region or RegionCode.UNKNOWN
    return NormalizedRecord(
        name=name,
        client_address=f"1 Main St {client_region}",
        property_address=f"2 High St {property_region}" if has_property else "",
        service_type=service_type,
        client_region=client_region,
        property_region=property_region,
        has_client_location=True,
        has_property_location=has_property,
        is_interstate=is_interstate(client_region, property_region),
    )


@pytest.fixture
def engine():
    return AnalyticsEngine()


def _titles(result):
    return [i.title for i in result.insights]


def test_totals_and_distributions(engine):
    records = [
        _record(RegionCode.NSW, RegionCode.QLD, "Investment"),
        _record(RegionCode.NSW, RegionCode.NSW, "Home"),
        _record(RegionCode.VIC, None, "Investment"),
        _record(RegionCode.UNKNOWN, RegionCode.UNKNOWN, "Investment"),
    ]

    result = engine.summarize(records)

    assert result.total_clients == 4
    assert result.total_properties == 3
    assert result.interstate_sales == 1
    assert result.service_types == {"Investment": 3, "Home": 1}
    assert result.region_stats[RegionCode.NSW] == RegionStat(clients=2, properties=1)
    assert result.region_stats[RegionCode.QLD] == RegionStat(clients=0, properties=1)
    assert result.region_stats[RegionCode.UNKNOWN] == RegionStat(clients=1, properties=0)
    assert result.top_region == "NSW"


def test_empty_record_set(engine):
    result = engine.summarize([])

    assert result.total_clients == 0
    assert result.total_properties == 0
    assert result.top_region == "N/A"
    assert result.insights == []


def test_interstate_insight_above_threshold(engine):
    records = [_record(RegionCode.VIC, RegionCode.WA) for _ in range(4)]
    records += [_record(RegionCode.VIC, RegionCode.VIC) for _ in range(6)]

    result = engine.summarize(records)

    assert result.insights[0].title == "Strong Interstate Investment"
    assert result.insights[0].type == InsightType.INFO
    assert result.insights[0].message.startswith("40.0% of clients")


def test_interstate_insight_not_at_threshold(engine):
    records = [_record(RegionCode.VIC, RegionCode.WA) for _ in range(3)]
    records += [_record(RegionCode.VIC, RegionCode.VIC) for _ in range(7)]

    assert "Strong Interstate Investment" not in _titles(engine.summarize(records))


def test_zero_properties_does_not_divide_by_zero(engine):
    result = engine.summarize([_record(RegionCode.VIC), _record(RegionCode.SA)])

    assert result.total_properties == 0
    assert "Strong Interstate Investment" not in _titles(result)


def test_nsw_to_qld_flow(engine):
    result = engine.summarize([
        _record(RegionCode.NSW, RegionCode.NSW),
        _record(RegionCode.VIC, RegionCode.QLD),
        _record(RegionCode.VIC, RegionCode.VIC),
        _record(RegionCode.VIC, RegionCode.VIC),
    ])

    flow = [i for i in result.insights if i.title == "NSW to QLD Investment Flow"]
    assert len(flow) == 1
    assert flow[0].type == InsightType.POSITIVE
    assert "NSW clients (1)" in flow[0].message
    assert "QLD properties (1)" in flow[0].message


def test_investment_focused_client_base(engine):
    records = [_record(RegionCode.VIC, service_type="Investment") for _ in range(8)]
    records += [_record(RegionCode.VIC, service_type="Home") for _ in range(2)]

    insight = engine.summarize(records).insights[-1]

    assert insight.title == "Investment-Focused Client Base"
    assert insight.message.startswith("80.0% of clients are investors")


def test_investment_share_at_threshold_does_not_fire(engine):
    records = [_record(RegionCode.VIC, service_type="Investment") for _ in range(7)]
    records += [_record(RegionCode.VIC, service_type="Home") for _ in range(3)]

    assert "Investment-Focused Client Base" not in _titles(engine.summarize(records))


def test_international_clients(engine):
    result = engine.summarize([
        _record(RegionCode.SINGAPORE, RegionCode.WA),
        _record(RegionCode.DUBAI, RegionCode.QLD),
        _record(RegionCode.VIC, RegionCode.VIC),
    ])

    insight = result.insights[-1]
    assert insight.title == "International Client Interest"
    assert insight.message.startswith("2 international clients")


def test_insight_order(engine):
    records = [
        _record(RegionCode.NSW, RegionCode.QLD, "Investment"),
        _record(RegionCode.SINGAPORE, RegionCode.QLD, "Investment"),
    ]

    assert _titles(engine.summarize(records)) == [
        "Strong Interstate Investment",
        "NSW to QLD Investment Flow",
        "Investment-Focused Client Base",
        "International Client Interest",
    ]


def test_top_region_ties_go_to_first_seen():
    stats = {
        RegionCode.VIC: RegionStat(clients=2),
        RegionCode.NSW: RegionStat(clients=1, properties=1),
    }
    assert AnalyticsEngine.top_region(stats) == "VIC"
    assert AnalyticsEngine.top_region({}) == "N/A"


def test_summary_is_recomputed_each_call(engine):
    records = [_record(RegionCode.VIC)]
    first = engine.summarize(records)
    records.append(_record(RegionCode.NSW))

    assert engine.summarize(records).total_clients == first.total_clients + 1


def test_to_dict(engine):
    payload = engine.summarize([_record(RegionCode.SINGAPORE, RegionCode.WA, "Investment")]).to_dict()

    assert payload["total_clients"] == 1
    assert payload["region_stats"]["Singapore"] == {"clients": 1, "properties": 0}
    assert payload["region_stats"]["WA"] == {"clients": 0, "properties": 1}
    assert payload["top_region"] == "Singapore"
    assert {"type": "info", "title": "International Client Interest"}.items() <= payload["insights"][-1].items()
