"""Reasoning core: differentials, interventions and multi-system synthesis."""
