import uuid

import pytest

from bvarlite.variable import ExposeError, SeriesOptions, Variable, count_exposed


def _unique(tag):
    return f"{tag}_{uuid.uuid4().hex}"


class _Gauge(Variable):
    def __init__(self, text="42"):
        self._text = text
        self._name = ""

    def describe(self, quote_string=False):
        return f'"{self._text}"' if quote_string else self._text

    def expose_impl(self, prefix, name):
        self._name = super().expose_impl(prefix, name)
        return self._name

    def name(self):
        return self._name


class _Anonymous(Variable):
    def describe(self, quote_string=False):
        return "anon"


def test_expose_increments_count_and_sets_name():
    gauge = _Gauge()
    before = count_exposed()
    name = _unique("gauge")
    assert gauge.expose(name) == name
    assert count_exposed() == before + 1
    assert gauge.name() == name
    assert not gauge.is_hidden()


def test_expose_as_joins_prefix_with_underscore():
    gauge = _Gauge()
    name = _unique("n")
    before = count_exposed()
    assert Variable.expose_as(gauge, "stats", name) == f"stats_{name}"
    assert count_exposed() == before + 1
    assert gauge.name() == f"stats_{name}"


def test_name_conflict_raises():
    name = _unique("dup")
    first = _Gauge()
    first.expose(name)
    before = count_exposed()
    second = _Gauge()
    with pytest.raises(ExposeError):
        Variable.expose(second, name)
    assert count_exposed() == before
    assert second.name() == ""
    assert Variable.is_hidden(second)


def test_hide_removes_entry():
    gauge = _Gauge()
    gauge.expose(_unique("h"))
    before = count_exposed()
    assert gauge.hide() is True
    assert count_exposed() == before - 1
    assert gauge.hide() is False


def test_hide_does_not_remove_other_owner():
    name = _unique("owner")
    owner = _Gauge()
    owner.expose(name)
    impostor = _Gauge()
    impostor._name = name
    before = count_exposed()
    assert impostor.hide() is False
    assert count_exposed() == before
    assert owner.hide() is True


def test_name_can_be_reused_after_hide():
    name = _unique("reuse")
    first = _Gauge()
    first.expose(name)
    before = count_exposed()
    assert Variable.hide(first) is True
    assert count_exposed() == before - 1
    second = _Gauge()
    assert Variable.expose(second, name) == name
    assert count_exposed() == before


def test_default_name_is_empty_so_hide_fails():
    anon = _Anonymous()
    before = count_exposed()
    Variable.expose(anon, _unique("anon"))
    assert count_exposed() == before + 1
    assert Variable.name(anon) == ""
    assert Variable.is_hidden(anon)
    assert Variable.hide(anon) is False
    assert count_exposed() == before + 1


def test_get_description_does_not_quote():
    gauge = _Gauge("abc")
    assert Variable.get_description(gauge) == "abc"
    assert gauge.describe(True) == '"abc"'


def test_series_options_defaults():
    options = SeriesOptions()
    assert options.fixed_length is True
    assert options.include_description is True
    assert options.max_length is None


def test_series_options_builders():
    options = (
        SeriesOptions()
        .with_fixed_length(False)
        .with_description(False)
        .with_max_length(10)
    )
    assert options == SeriesOptions(False, False, 10)
    assert SeriesOptions().with_max_length(None).max_length is None