"""Telemetry system for flight data recording and analysis."""

from skyflight.telemetry.telemetry_logger import TelemetryAnalyzer, TelemetryLogger

__all__ = ["TelemetryLogger", "TelemetryAnalyzer"]
