import threading
import uuid

from bvarlite.recorder import IntRecorder, Stat
from bvarlite.variable import count_exposed


def _unique(tag):
    return f"{tag}_{uuid.uuid4().hex}"


def test_int_recorder():
    recorder = IntRecorder()
    recorder.expose(_unique("test"))
    value = recorder.get_value()
    assert value.sum == 0
    assert value.num == 0

    recorder.add(1)
    value = recorder.get_value()
    assert value.sum == 1
    assert value.num == 1

    recorder.add(2)
    value = recorder.get_value()
    assert value.sum == 3
    assert value.num == 2

    recorder.reset()
    value = recorder.get_value()
    assert value.sum == 0
    assert value.num == 0


def test_reset_returns_previous_value():
    recorder = IntRecorder().add(4).add(6)
    assert recorder.reset() == Stat(10, 2)
    assert recorder.get_value() == Stat()


def test_average_of_samples():
    recorder = IntRecorder()
    for sample in (99, 1, 99, 105):
        recorder.add(sample)
    assert recorder.get_value() == Stat(304, 4)
    assert recorder.average() == 76
    assert recorder.average_double() == 76.0
    assert recorder.describe() == "76"


def test_samples_from_many_threads_are_summed():
    recorder = IntRecorder()
    samples = list(range(1, 41))
    chunks = [samples[i::4] for i in range(4)]

    def work(chunk):
        for sample in chunk:
            recorder.add(sample)

    workers = [threading.Thread(target=work, args=(chunk,)) for chunk in chunks]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    recorder.add(0)
    assert recorder.get_value() == Stat(sum(samples), len(samples) + 1)


def test_stat_averages():
    assert Stat(7, 2).get_average_int() == 3
    assert Stat(-7, 2).get_average_int() == -3
    assert Stat(1, 2).get_average_double() == 0.5
    assert Stat().get_average_int() == 0
    assert Stat().get_average_double() == 0.0


def test_stat_arithmetic():
    assert Stat(3, 1) + Stat(4, 2) == Stat(7, 3)
    assert Stat(7, 3) - Stat(4, 2) == Stat(3, 1)
    total = Stat()
    total += Stat(2, 1)
    assert total == Stat(2, 1)


def test_stat_str():
    assert str(Stat(7, 2)) == "3"
    assert str(Stat(1, 2)) == "0.5"
    assert str(Stat()) == "0"


def test_expose_and_hide():
    recorder = IntRecorder()
    assert recorder.is_hidden()
    name = _unique("rec")
    recorder.expose(name)
    assert recorder.name() == name
    assert not recorder.is_hidden()
    before = count_exposed()
    assert recorder.hide() is True
    assert count_exposed() == before - 1


def test_with_prefix_name():
    name = _unique("second")
    recorder = IntRecorder.with_prefix_name("stats", name)
    assert recorder.name() == f"stats_{name}"
    named = IntRecorder.with_name(_unique("plain"))
    assert not named.is_hidden()


def test_with_name_conflict_leaves_unnamed():
    name = _unique("clash")
    IntRecorder.with_name(name)
    second = IntRecorder.with_name(name)
    assert second.name() == ""


def test_set_debug_name():
    recorder = IntRecorder()
    recorder.set_debug_name("debug")
    assert recorder.debug_name == "debug"
    assert recorder.name() == ""