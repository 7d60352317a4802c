"""Property-based tests using Hypothesis for the accumulator and encoder."""

from hypothesis import given, settings
from hypothesis import strategies as st

from pizzeria.metrics.accumulator import MetricsAccumulator
from pizzeria.metrics.encoder import MetricKind, ValueType, build_metric

_attr_keys = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12)


class TestAccumulatorProperties:
    @given(methods=st.lists(st.sampled_from(["GET", "POST"]), max_size=200))
    @settings(max_examples=50)
    def test_interleaved_request_counts_exact(self, methods):
        acc = MetricsAccumulator()
        for m in methods:
            acc.record_request(m)
        snap = acc.snapshot()
        assert snap.requests.get("GET", 0) == methods.count("GET")
        assert snap.requests.get("POST", 0) == methods.count("POST")

    @given(samples=st.lists(st.floats(min_value=0, max_value=60_000, allow_nan=False), min_size=1, max_size=50))
    @settings(max_examples=50)
    def test_drain_returns_every_sample_once(self, samples):
        acc = MetricsAccumulator()
        for s in samples:
            acc.record_request_latency(s)
        first = acc.snapshot(drain=True)
        second = acc.snapshot(drain=True)
        assert first.request_latencies == samples
        assert second.request_latencies == []

    @given(
        outcomes=st.lists(
            st.tuples(st.booleans(), st.floats(min_value=0, max_value=100, allow_nan=False)),
            max_size=50,
        )
    )
    @settings(max_examples=50)
    def test_transaction_totals(self, outcomes):
        acc = MetricsAccumulator()
        for ok, amount in outcomes:
            acc.transaction_completed(ok, amount)
        snap = acc.snapshot()
        assert snap.pizzas_sold == sum(1 for ok, _ in outcomes if ok)
        assert snap.purchase_failures == sum(1 for ok, _ in outcomes if not ok)
        assert snap.pizzas_sold + snap.purchase_failures == len(outcomes)


class TestEncoderProperties:
    @given(
        attributes=st.dictionaries(_attr_keys, st.text(max_size=20), max_size=5),
        source=st.text(min_size=1, max_size=30),
        kind=st.sampled_from(list(MetricKind)),
        value_type=st.sampled_from(list(ValueType)),
    )
    @settings(max_examples=100)
    def test_source_always_present_and_authoritative(self, attributes, source, kind, value_type):
        metric = build_metric("m", 1, "1", kind, value_type, attributes, source=source)
        attrs = metric[kind.value]["dataPoints"][0]["attributes"]
        sources = [a["value"]["stringValue"] for a in attrs if a["key"] == "source"]
        assert sources == [source]
        assert len(attrs) == len({k for k in attributes if k != "source"}) + 1

    @given(kind=st.sampled_from(list(MetricKind)))
    def test_only_sums_are_monotonic(self, kind):
        metric = build_metric("m", 1, "1", kind, ValueType.INT, source="s")
        assert ("isMonotonic" in metric[kind.value]) == (kind is MetricKind.SUM)
