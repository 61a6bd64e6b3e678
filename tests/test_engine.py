"""
Tests for flow execution: sequencing, merging, done, unknown flows and errors.
"""

import logging

import pytest

from pyflows import (
    ActionResultError,
    DataCodecError,
    Flows,
    FlowsError,
    HookKind,
    InvalidControlError,
    InvalidDataError,
)

from conftest import add, append, control


@pytest.mark.asyncio
async def test_runs_every_action_in_order(flows):
    flows.register("abc", [append("a"), append("b"), append("c")])

    output = await flows.execute("abc", {})
    assert output == {"seen": ["a", "b", "c"], "$$": {}}


@pytest.mark.asyncio
async def test_each_action_runs_exactly_once(flows):
    calls = []

    def step(name):
        def _step(data, ctx):
            calls.append(name)
            return data

        return _step

    flows.register("main", [step(1), step(2), step(3)])
    await flows.execute("main", {"x": 1})
    assert calls == [1, 2, 3]


@pytest.mark.asyncio
async def test_sync_and_async_actions_mix(flows):
    async def double(data, ctx):
        return {"n": data["n"] * 2}

    flows.register("math", [double, lambda data, ctx: {"n": data["n"] + 1}, double])

    output = await flows.execute("math", {"n": 1})
    assert output["n"] == 6


@pytest.mark.asyncio
async def test_result_replaces_payload(flows):
    flows.register("main", [lambda data, ctx: {"b": 2}])

    output = await flows.execute("main", {"a": 1})
    assert output == {"b": 2, "$$": {}}


@pytest.mark.asyncio
async def test_envelope_carries_over_between_actions(flows):
    seen = []

    def first(data, ctx):
        return {"$$": {"trace": "t-1"}}

    def second(data, ctx):
        seen.append(data)
        return {"ok": True}

    flows.register("main", [first, second])

    output = await flows.execute("main", {})
    assert seen == [{"$$": {"trace": "t-1"}}]
    assert output == {"ok": True, "$$": {"trace": "t-1"}}


@pytest.mark.asyncio
async def test_done_short_circuits(flows, recorder):
    never = []
    flows.register(
        "main",
        [add("a", 1), control(done=True), lambda data, ctx: never.append(1) or data],
    )

    output = await flows.execute("main", {})

    assert never == []
    assert output == {"a": 1, "$$": {"done": True}}
    (post_flow,) = recorder.of(HookKind.POST_FLOW)
    assert post_flow.output == {"a": 1, "$$": {"done": True}}
    assert len(recorder.of(HookKind.PRE_ACTION)) == 2


@pytest.mark.asyncio
async def test_done_in_input_runs_nothing(flows, recorder):
    flows.register("main", [add("a", 1)])

    output = await flows.execute("main", {"$$": {"done": True}})

    assert output == {"$$": {"done": True}}
    assert recorder.kinds == [HookKind.PRE_FLOW, HookKind.POST_FLOW]


@pytest.mark.asyncio
async def test_empty_flow(flows, recorder):
    flows.register("empty", [])

    output = await flows.execute("empty", {"x": 1})

    assert output == {"x": 1, "$$": {}}
    assert recorder.kinds == [HookKind.PRE_FLOW, HookKind.POST_FLOW]


@pytest.mark.asyncio
async def test_unknown_flow_is_a_noop(flows, recorder, caplog):
    data = {"x": 1}

    with caplog.at_level(logging.WARNING, logger="pyflows"):
        output = await flows.execute("nope", data)

    assert output == {"x": 1}
    assert output is not data
    assert recorder.events == []
    assert "nope flow does not exist" in caplog.text


@pytest.mark.asyncio
async def test_injected_logger_receives_warning(caplog):
    flows = Flows(logger=logging.getLogger("tests.custom"))

    with caplog.at_level(logging.WARNING, logger="tests.custom"):
        await flows.execute("missing", {})

    assert [r.name for r in caplog.records] == ["tests.custom"]


@pytest.mark.asyncio
async def test_none_input_is_empty_mapping(flows):
    flows.register("main", [add("a", 1)])
    assert await flows.execute("main") == {"a": 1, "$$": {}}


@pytest.mark.asyncio
async def test_input_is_not_mutated(flows):
    def mutate(data, ctx):
        data["items"].append("added")
        return data

    flows.register("main", [mutate])
    original = {"items": []}

    output = await flows.execute("main", original)

    assert original == {"items": []}
    assert output["items"] == ["added"]


@pytest.mark.asyncio
async def test_output_is_a_private_copy(flows):
    kept = []

    def keep(data, ctx):
        result = {"nested": {"v": 1}}
        kept.append(result)
        return result

    flows.register("main", [keep])

    output = await flows.execute("main", {})
    kept[0]["nested"]["v"] = 99
    assert output["nested"]["v"] == 1


@pytest.mark.asyncio
async def test_context_is_passed_by_identity(flows):
    seen = []
    flows.register("main", [lambda d, ctx: seen.append(ctx) or d] * 2)

    ctx = {"db": object()}
    await flows.execute("main", {}, ctx)

    assert seen[0] is ctx
    assert seen[1] is ctx


@pytest.mark.asyncio
async def test_default_context_is_fresh_mapping(flows):
    seen = []
    flows.register("main", [lambda d, ctx: seen.append(ctx) or d])

    await flows.execute("main", {})
    await flows.execute("main", {})

    assert seen == [{}, {}]
    assert seen[0] is not seen[1]


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [5, "text", None, [1, 2], True])
async def test_non_mapping_result_is_rejected(flows, recorder, result):
    flows.register("main", [add("a", 1), lambda data, ctx: result])

    with pytest.raises(ActionResultError) as exc_info:
        await flows.execute("main", {})

    error = exc_info.value
    assert error.flow_name == "main"
    assert error.index == 1
    assert "main" in str(error)
    assert "action number 1" in str(error)
    assert isinstance(error, TypeError)
    assert isinstance(error, FlowsError)
    (event,) = recorder.of(HookKind.EXCEPTION)
    assert event.error is error


@pytest.mark.asyncio
async def test_unserializable_result_is_rejected(flows):
    flows.register("main", [lambda data, ctx: {"fn": print}])

    with pytest.raises(DataCodecError):
        await flows.execute("main", {})


@pytest.mark.asyncio
async def test_output_keeps_result_key_order(flows, recorder):
    flows.register(
        "main",
        [
            lambda data, ctx: {"z": 1, "a": 2, "$$": {"i": 0}},
            lambda data, ctx: {**data, "m": 3},
        ],
    )

    output = await flows.execute("main", {})
    assert list(output) == ["z", "a", "m", "$$"]
    assert list(recorder.of(HookKind.POST_ACTION)[0].output) == ["z", "a", "$$"]
    assert list(recorder.of(HookKind.POST_FLOW)[0].output) == ["z", "a", "m", "$$"]


@pytest.mark.asyncio
async def test_non_string_keys_in_result_are_rejected(flows):
    flows.register("ints", [lambda data, ctx: {1: "a"}])
    flows.register("mixed", [lambda data, ctx: {"a": 1, 2: "b"}])

    with pytest.raises(DataCodecError):
        await flows.execute("ints", {})
    with pytest.raises(DataCodecError):
        await flows.execute("mixed", {})


@pytest.mark.asyncio
async def test_invalid_envelope_in_result(flows):
    flows.register("main", [lambda data, ctx: {"$$": {"jump": 1}}])

    with pytest.raises(InvalidControlError):
        await flows.execute("main", {})


@pytest.mark.asyncio
async def test_unserializable_input(flows):
    flows.register("main", [])

    with pytest.raises(DataCodecError):
        await flows.execute("main", {"obj": object()})


@pytest.mark.asyncio
async def test_non_mapping_input(flows, recorder):
    flows.register("main", [])

    with pytest.raises(InvalidDataError):
        await flows.execute("main", [1, 2])
    assert recorder.events == []


@pytest.mark.asyncio
async def test_action_error_propagates_unchanged(flows):
    error = KeyError("missing")

    def fail(data, ctx):
        raise error

    flows.register("main", [fail])

    with pytest.raises(KeyError) as exc_info:
        await flows.execute("main", {})
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_no_post_hooks_after_failure(flows, recorder):
    def fail(data, ctx):
        raise RuntimeError("nope")

    flows.register("main", [fail, add("never", True)])

    with pytest.raises(RuntimeError):
        await flows.execute("main", {})

    assert HookKind.POST_ACTION not in recorder.kinds
    assert HookKind.POST_FLOW not in recorder.kinds


@pytest.mark.asyncio
async def test_failing_exception_observer_keeps_original_error(flows, caplog):
    calls = []

    def broken(event):
        raise RuntimeError("observer failed")

    flows.hook(HookKind.EXCEPTION, broken)
    flows.hook(HookKind.EXCEPTION, calls.append)

    def fail(data, ctx):
        raise ValueError("action failed")

    flows.register("main", [fail])

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError, match="action failed"):
            await flows.execute("main", {})

    assert len(calls) == 1
    assert "observer failed" in caplog.text
