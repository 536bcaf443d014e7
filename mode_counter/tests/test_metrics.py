from mode_counter import metrics


def test_observe_call(registry):
    metrics.observe_call(call="switch_state", status="module_error", weight=100, error_kind="RedundantSwitch")
    metrics.observe_call(call="switch_state", status="bad_origin", weight=0)
    s = registry.get_sample_value
    assert s("mode_counter_calls_total", {"call": "switch_state", "status": "module_error"}) == 1.0
    assert s("mode_counter_calls_total", {"call": "switch_state", "status": "bad_origin"}) == 1.0
    assert s("mode_counter_errors_total", {"kind": "RedundantSwitch"}) == 1.0
    assert s("mode_counter_call_weight_count", {"call": "switch_state"}) == 1.0
    assert s("mode_counter_call_weight_sum", {"call": "switch_state"}) == 100.0


def test_time_batch_apply(registry):
    with metrics.time_batch_apply():
        pass
    assert registry.get_sample_value("mode_counter_batch_apply_seconds_count") == 1.0


def test_exposition_text(registry):
    metrics.observe_call(call="set_value", status="success", weight=10_000)
    text = metrics.generate_latest_text().decode("utf-8")
    assert 'mode_counter_calls_total{call="set_value",status="success"} 1.0' in text
    assert metrics.get_registry() is registry
