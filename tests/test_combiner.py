import logging
import threading

import pytest

from bvarlite.combiner import (
    Agent,
    AgentCombiner,
    AgentModifier,
    Combiner,
    IgnoreErrorHandler,
    LoggingErrorHandler,
    OpAsModifier,
)


class _Sum(Combiner):
    def combine(self, v1, v2):
        return v1 + v2

    def modify(self, v):
        return v

    def name(self):
        return "sum"


def _in_thread(fn):
    box = []
    worker = threading.Thread(target=lambda: box.append(fn()))
    worker.start()
    worker.join()
    return box[0]


def test_same_thread_gets_same_agent():
    combiner = AgentCombiner(0, _Sum())
    first = combiner.get_or_create_tls_agent()
    second = combiner.get_or_create_tls_agent()
    assert first is second
    assert combiner.agent_count() == 1
    assert first.id == 1
    assert first.value == 0


def test_other_thread_gets_new_agent():
    combiner = AgentCombiner(0, _Sum())
    mine = combiner.get_or_create_tls_agent()
    theirs = _in_thread(combiner.get_or_create_tls_agent)
    assert theirs is not mine
    assert theirs.id == 2
    assert combiner.agent_count() == 2
    members = list(combiner)
    assert any(a is mine for a in members)
    assert any(a is theirs for a in members)


def test_combine_agents_folds_values():
    combiner = AgentCombiner(0, _Sum())
    combiner.get_or_create_tls_agent().value = 5

    def other():
        agent = combiner.get_or_create_tls_agent()
        agent.value = 7
        return agent

    _in_thread(other)
    assert combiner.combine_agents() == 12


def test_combine_without_agents_is_identity():
    combiner = AgentCombiner(100, _Sum())
    assert combiner.combine_agents() == 100
    assert combiner.agent_count() == 0


def test_reset_returns_previous_and_restores_identity():
    combiner = AgentCombiner(0, _Sum())
    combiner.get_or_create_tls_agent().value = 9
    before = combiner.combine_agents()
    assert combiner.reset_all_agents() == before
    assert combiner.combine_agents() == 0
    assert all(agent.value == 0 for agent in combiner)


def test_name_and_op():
    op = _Sum()
    combiner = AgentCombiner(0, op, "adder")
    assert combiner.name() == "adder"
    combiner.set_name("renamed")
    assert combiner.name() == "renamed"
    assert combiner.op() is op


def test_agent_equality_ignores_lock():
    assert Agent(3, 1) == Agent(3, 1)
    assert Agent(3, 1) != Agent(4, 1)


def test_op_as_modifier_combines():
    modifier = OpAsModifier(_Sum())
    assert modifier.modify(3, 4) == 7


def test_agent_modifier_calls_function():
    modifier = AgentModifier(lambda value, arg: value * arg)
    assert modifier.modify(3, 4) == 12


def test_abstract_combiner_cannot_be_built():
    with pytest.raises(TypeError):
        Combiner()


def test_logging_error_handler_logs(caplog):
    with caplog.at_level(logging.ERROR):
        LoggingErrorHandler().on_error("boom")
    assert "Sampler error: boom" in caplog.text


def test_ignore_error_handler_logs_nothing(caplog):
    with caplog.at_level(logging.DEBUG):
        result = IgnoreErrorHandler().on_error("boom")
    assert result is None
    assert caplog.records == []