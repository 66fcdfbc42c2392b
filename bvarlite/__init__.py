"""In-process metric variables: a name registry, reducers, recorders, status values, windows, series and samplers."""

__version__ = "0.1.0"