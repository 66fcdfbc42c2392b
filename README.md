# bvarlite

In-process metric variables for Python programs. Each variable keeps a value
that threads can update, and can be *exposed* under a unique name in a
process-wide registry.

## Modules

- `bvarlite.variable`: the `Variable` base class with `expose`, `expose_as`,
  `hide`, `is_hidden`, `name`, `describe` and `get_description`.
  `expose(name)` and `expose_as(prefix, name)` return the full name
  (`prefix_name` when a prefix is given) and raise `ExposeError` when that
  name is already registered. `hide()` removes the variable's name from the
  registry and returns whether it did. `count_exposed()` reports how many
  names are registered. `SeriesOptions` is a frozen set of formatting options
  with `with_fixed_length`, `with_description` and `with_max_length`.
- `bvarlite.combiner`: `Combiner` (the operation interface), `AgentCombiner`
  (one `Agent` per thread, combined on demand), `Modifier`, `AgentModifier`,
  `OpAsModifier`, and the error handlers `SampleErrorHandler`,
  `IgnoreErrorHandler` and `LoggingErrorHandler`.
- `bvarlite.status`: `Status`, a value that can be read with `get_value` and
  replaced with `set_value`. `describe(True)` puts string values in quotes.
- `bvarlite.recorder`: `IntRecorder` collects integer samples per thread and
  reports them as a `Stat` (sum and count) with `get_value`, `average`,
  `average_double` and `reset`.
- `bvarlite.reducer`: `Reducer` folds values with an associative, commutative
  operation such as `AddTo`, `MinusFrom`, `MaxTo`, `MinTo`, `SumCombiner`,
  `MaxCombiner` or `MinCombiner`. `Adder`, `Maxer` and `Miner` are ready-made
  variables built on it.
- `bvarlite.window`: `Window` keeps the most recent samples taken from a source
  variable's `get_value` each time `sample()` is called; `PerSecond` reports
  the newest value of its one-second window (0.0 when empty) and, when
  exposed as `name`, also exposes that window as `name_second`.
  `WindowType` lists the standard window lengths (`duration_secs`,
  `duration`, `contains`, `label`); `common_windows()` and `all_windows()`
  return them; `current_time_ms()` gives the Unix time in milliseconds.
- `bvarlite.series`: `Series` keeps `DataPoint`s at second, minute, hour and
  day granularity and `describe(options)` renders them as JSON;
  `SeriesFormatter` does the same through `str()`.
- `bvarlite.sampler`: `GlobalSamplerState` runs a background thread that
  periodically calls `take_sample()` on registered samplers, holding them only
  by weak reference and stopping once none are alive. `ReducerSampler`
  registers itself with `schedule()` and reads its reducer's value on each
  sample; `SeriesSampler` keeps the most recent values passed to `append`.

## Example

```python
from bvarlite.recorder import IntRecorder
from bvarlite.variable import count_exposed

recorder = IntRecorder()
for sample in (99, 1, 99, 105):
    recorder.add(sample)

print(recorder.get_value())   # 76 (a Stat with sum 304 and num 4)
print(recorder.average())     # 76

recorder.expose("test_recorder")
print(recorder.name())        # test_recorder
print(count_exposed())

recorder.hide()
```

```python
from bvarlite.reducer import Maxer
from bvarlite.status import Status

status = Status.with_name("starting", "service_state")
status.set_value("ready")
print(status.describe(True))  # "ready"

maxer = Maxer(0)
maxer.add(3).add(7).add(5)
print(maxer.get_value())      # 7
```

The `with_name` and `with_prefix_name` constructors ignore a name that is
already taken; the variable is then left unexposed.

## Command line

```
bvarlite [--name NAME] [--prefix PREFIX] [--second-name NAME]
```

Records a few samples in an `IntRecorder`, exposes it and a second recorder,
prints their values and the registry count, then hides the first one.

## What it does not do

The registry only records names; there is no server, page or dump that lists
exposed variables with their values. Nothing is stored outside the process.

## Tests

```
pip install -e .[test]
pytest
```