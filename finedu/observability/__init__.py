"""Observability (Prometheus metrics) for finedu"""
from finedu.observability.metrics import record_error, record_event

__all__ = ["record_error", "record_event"]
