"""
Symptom Journal - Personal health-symptom journal core.

Durable entry storage, period aggregation, and CSV/PDF report export
for a local-only daily symptom log.
"""

__version__ = "0.1.0"
