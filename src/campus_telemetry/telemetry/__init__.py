"""Synthetic telemetry generation."""

from campus_telemetry.telemetry.sample import TelemetrySample
from campus_telemetry.telemetry.synthesizer import TelemetrySynthesizer, synthesize

__all__ = ["TelemetrySample", "TelemetrySynthesizer", "synthesize"]
