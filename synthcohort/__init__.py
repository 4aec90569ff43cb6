"""
SynthCohort
===========

Time-stepped phase-state engine for synthetic population health simulation.

This package advances synthetic patients ("agents") through simulated time,
running a multi-year weight-management lifecycle and an annual
insurance-coverage lifecycle on each agent.
"""

__version__ = "0.1.0"
__author__ = "SynthCohort"
