from .recorder import DatabaseMetricRecorder, MetricRecorder, Recorder, build_recorder

__all__ = ["DatabaseMetricRecorder", "MetricRecorder", "Recorder", "build_recorder"]
