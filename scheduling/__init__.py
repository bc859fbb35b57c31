"""Slot generation and booking consistency for therapist appointments."""
