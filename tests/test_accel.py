"""Tests for the dual-tier execution layer."""

import asyncio
import threading
import time

import pytest

from volt.accel import (
    AccelerationHandle,
    AccelerationLoadError,
    Accelerator,
    ModuleNotLoadedError,
    ReferenceTier,
    ensure_acceleration_loaded,
    import_kernel,
    is_acceleration_loaded,
)
from volt.accel import kernel
from volt.assertions import (
    BodyContainsAssertion,
    BodyJsonAssertion,
    HeaderEqualsAssertion,
    HeaderExistsAssertion,
    ResponseTimeAssertion,
    StatusAssertion,
)
from volt.extraction import ExtractionConfig
from volt.json_path import NOT_FOUND
from volt.response import ResponseData


class CountingLoader:
    """Loader that records how often it runs and can be told to fail."""

    def __init__(self, delay=0.05, error=None):
        self.delay = delay
        self.error = error
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return import_kernel()


def loaded_accelerator() -> Accelerator:
    accelerator = Accelerator()
    asyncio.run(accelerator.ensure_loaded())
    return accelerator


# --- loading ---


def test_concurrent_callers_share_one_load():
    loader = CountingLoader()
    accelerator = Accelerator(loader=loader)

    async def scenario():
        return await asyncio.gather(*(accelerator.ensure_loaded() for _ in range(10)))

    handles = asyncio.run(scenario())
    assert loader.calls == 1
    assert accelerator.load_count == 1
    assert all(h is handles[0] for h in handles)
    assert isinstance(handles[0], AccelerationHandle)
    assert accelerator.is_loaded


def test_ensure_loaded_is_idempotent():
    loader = CountingLoader(delay=0)
    accelerator = Accelerator(loader=loader)
    first = asyncio.run(accelerator.ensure_loaded())
    second = asyncio.run(accelerator.ensure_loaded())
    assert first is second
    assert loader.calls == 1


def test_failed_load_reaches_every_waiter():
    loader = CountingLoader(error=ImportError("no kernel"))
    accelerator = Accelerator(loader=loader)

    async def scenario():
        return await asyncio.gather(
            *(accelerator.ensure_loaded() for _ in range(5)), return_exceptions=True
        )

    outcomes = asyncio.run(scenario())
    assert loader.calls == 1
    assert all(isinstance(o, AccelerationLoadError) for o in outcomes)
    assert all(o is outcomes[0] for o in outcomes)
    assert isinstance(outcomes[0].__cause__, ImportError)
    assert not accelerator.is_loaded


def test_load_can_be_retried_after_failure():
    loader = CountingLoader(delay=0, error=RuntimeError("boom"))
    accelerator = Accelerator(loader=loader)

    with pytest.raises(AccelerationLoadError, match="boom"):
        asyncio.run(accelerator.ensure_loaded())

    loader.error = None
    asyncio.run(accelerator.ensure_loaded())
    assert accelerator.is_loaded
    assert accelerator.load_count == 2


def test_sync_call_before_load_fails_loudly():
    accelerator = Accelerator()
    assertion = StatusAssertion(id="s", operator="equals", expected="200")

    with pytest.raises(ModuleNotLoadedError):
        accelerator.evaluate_sync(assertion, ResponseData(status_code=200))
    with pytest.raises(ModuleNotLoadedError):
        accelerator.substitute_sync("{{a}}", {"a": "1"})
    assert not issubclass(ModuleNotLoadedError, ValueError)


def test_sync_and_async_paths_after_load():
    accelerator = loaded_accelerator()
    response = ResponseData(status_code=200, body='{"a": 1}')
    assertion = BodyJsonAssertion(id="j", operator="equals", property="a", expected="1")

    assert accelerator.evaluate_sync(assertion, response).passed
    assert asyncio.run(accelerator.evaluate(assertion, response)).passed
    assert accelerator.substitute_batch_sync(["{{x}}"], {"x": "y"}) == ["y"]
    assert asyncio.run(accelerator.find_variables("{{a}}{{b}}")) == ["a", "b"]
    assert accelerator.extract_sync(ExtractionConfig("json", "a"), response).value == "1"


def test_default_accelerator_functions():
    handle = asyncio.run(ensure_acceleration_loaded())
    assert is_acceleration_loaded()
    assert handle.name == "accelerated"


def test_fake_tier_can_be_injected():
    class FakeKernel:
        @staticmethod
        def substitute(text, variables):
            return "fake"

    accelerator = Accelerator(loader=lambda: FakeKernel)
    tier = asyncio.run(accelerator.ensure_loaded())
    assert tier.substitute("{{a}}", {}) == "fake"


# --- parse once per batch ---


def test_batch_parses_body_once(monkeypatch):
    calls = []
    original = kernel.parse_json

    def counting(text):
        calls.append(text)
        return original(text)

    monkeypatch.setattr(kernel, "parse_json", counting)
    response = ResponseData(status_code=200, body='{"a": {"b": [1, 2]}, "c": "text"}')
    assertions = [
        BodyJsonAssertion(id="1", operator="exists", property="a.b[1]"),
        BodyJsonAssertion(id="2", operator="contains", property="c", expected="ex"),
        BodyJsonAssertion(id="3", operator="notExists", property="z"),
        StatusAssertion(id="4", operator="equals", expected="200"),
    ]
    results = kernel.evaluate_batch(assertions, response)
    assert all(r.passed for r in results)
    assert len(calls) == 1


# --- tier equivalence ---


RESPONSES = [
    ResponseData(
        status_code=200,
        headers={"Content-Type": "application/json; charset=utf-8", "X-Trace": "t-1"},
        body='{"data": {"name": "john", "items": [{"id": 1}, {"id": 2}], "flag": true, "n": null}}',
        timing_ms=87,
    ),
    ResponseData(status_code=404, body="<html>Not Found</html>" + "." * 150, timing_ms=5),
    ResponseData(status_code=500, headers={"x-trace": ""}, body="", timing_ms=0),
    ResponseData(status_code=200, body="[" * 100000 + "]" * 100000, timing_ms=3),
    ResponseData(status_code=200, body='{"data": {"name": 10.0, "items": [1.0, 2.5]}}', timing_ms=3),
]

ASSERTIONS = [
    StatusAssertion(id="s1", operator="equals", expected="200"),
    StatusAssertion(id="s2", operator="notEquals", expected="abc"),
    StatusAssertion(id="s3", operator="lessThan", expected="400"),
    StatusAssertion(id="s4", operator="greaterThan", expected="x"),
    StatusAssertion(id="s5", operator="equals", expected="1" * 5000),
    StatusAssertion(id="s6", operator="equals", expected="\u0662\u0660\u0660"),
    ResponseTimeAssertion(id="t3", operator="lessThan", expected="9" * 5000),
    ResponseTimeAssertion(id="t1", operator="lessThan", expected="50"),
    ResponseTimeAssertion(id="t2", operator="greaterThan", expected="-1"),
    BodyContainsAssertion(id="b1", operator="contains", expected="john"),
    BodyContainsAssertion(id="b2", operator="notContains", expected="Not Found"),
    BodyContainsAssertion(id="b3", operator="matches", expected=r"\"id\":\s*2"),
    BodyContainsAssertion(id="b4", operator="matches", expected="[unclosed"),
    BodyJsonAssertion(id="j1", operator="exists", property="data.items[1].id"),
    BodyJsonAssertion(id="j2", operator="notExists", property="data.items[2]"),
    BodyJsonAssertion(id="j3", operator="equals", property="data.name", expected='"john"'),
    BodyJsonAssertion(id="j4", operator="notEquals", property="data.items", expected='[{"id":1}]'),
    BodyJsonAssertion(id="j5", operator="contains", property="data.flag", expected="tru"),
    BodyJsonAssertion(id="j6", operator="equals", property="data.n", expected="null"),
    BodyJsonAssertion(id="j7", operator="equals", property="data.name", expected="john"),
    BodyJsonAssertion(id="j8", operator="exists", property=""),
    BodyJsonAssertion(id="j10", operator="equals", property="data.name", expected="10"),
    BodyJsonAssertion(id="j11", operator="exists", property="data.items[\u0660]"),
    BodyJsonAssertion(id="j9", operator="equals", property="data.name", expected="1", enabled=False),
    HeaderExistsAssertion(id="h1", operator="exists", property="x-TRACE"),
    HeaderExistsAssertion(id="h2", operator="notExists", property="Content-Type"),
    HeaderEqualsAssertion(id="h3", operator="equals", property="x-trace", expected="t-1"),
    HeaderEqualsAssertion(id="h4", operator="notEquals", property="X-Trace", expected=""),
    HeaderEqualsAssertion(id="h5", operator="contains", property="content-type", expected="json"),
]


@pytest.mark.parametrize("response", RESPONSES)
def test_tiers_produce_identical_batches(response):
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    assert accelerated.evaluate_batch(ASSERTIONS, response) == reference.evaluate_batch(
        ASSERTIONS, response
    )


@pytest.mark.parametrize("response", RESPONSES)
def test_tiers_produce_identical_single_results(response):
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    for assertion in ASSERTIONS:
        assert accelerated.evaluate(assertion, response) == reference.evaluate(assertion, response)


@pytest.mark.parametrize(
    "config",
    [
        ExtractionConfig("json", "data.items[0]"),
        ExtractionConfig("json", "data.n"),
        ExtractionConfig("json", "data.missing"),
        ExtractionConfig("header", "X-TRACE"),
        ExtractionConfig("regex", r'"id": (\d)'),
        ExtractionConfig("regex", "(("),
        ExtractionConfig("status"),
        ExtractionConfig("body"),
    ],
)
def test_tiers_extract_identically(config):
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    for response in RESPONSES:
        assert accelerated.extract(config, response) == reference.extract(config, response)


@pytest.mark.parametrize(
    "text",
    ["", "plain", "{{a}}", "{{ a }}/{{b}}/{{a}}", "{{missing}}", "{{a}", "x{{}}y", "{{a}}{{c}}"],
)
def test_tiers_substitute_identically(text):
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    variables = {"a": "1", "b": "{{a}}"}

    assert accelerated.substitute(text, variables) == reference.substitute(text, variables)
    assert accelerated.find_variables(text) == reference.find_variables(text)
    assert accelerated.has_variables(text) == reference.has_variables(text)
    assert accelerated.substitute_batch([text, text], {}) == reference.substitute_batch([text, text], {})


def test_tiers_substitute_headers_identically():
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    headers = {"{{h}}": "one", "X-Key": "{{v}}", "Accept": "*/*"}
    variables = {"h": "X-Key", "v": "two"}
    assert accelerated.substitute_headers(headers, variables) == reference.substitute_headers(
        headers, variables
    )


def test_tiers_resolve_identically():
    accelerated = loaded_accelerator().require()
    reference = ReferenceTier()
    document = {"a": [{"b": None}], "c": {}}
    for path in ["", "a", "a[0].b", "a[1]", "c.d", "a.b"]:
        assert accelerated.resolve(document, path) == reference.resolve(document, path)


def test_accelerated_batch_treats_deep_nesting_as_invalid_json():
    accelerated = loaded_accelerator().require()
    response = ResponseData(status_code=200, body="[" * 100000 + "]" * 100000)
    assertions = [
        BodyJsonAssertion(id="1", operator="exists", property="x"),
        BodyJsonAssertion(id="2", operator="notExists", property="x"),
    ]
    results = accelerated.evaluate_batch(assertions, response)
    assert [(r.passed, r.actual) for r in results] == [(False, "Invalid JSON"), (False, "Invalid JSON")]
    assert accelerated.extract(ExtractionConfig("json", "x"), response) is NOT_FOUND


def test_accelerated_tier_rejects_unusable_integers():
    accelerated = loaded_accelerator().require()
    response = ResponseData(status_code=200)
    for expected in ("1" * 5000, "٢٠٠"):
        result = accelerated.evaluate(
            StatusAssertion(id="s", operator="equals", expected=expected), response
        )
        assert result.passed is False
        assert result.message == f"Expected {expected}, got 200"
