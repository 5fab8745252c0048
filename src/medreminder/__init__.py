"""
MedReminder: prescription reminder and dose-adherence backend

A clean architecture-based service that turns recurring medication schedules
into trackable dose instances and reports adherence over time.
"""

__version__ = "0.1.0"
__author__ = "MedReminder Team"
__description__ = "Medication reminder and dose-adherence tracking service"
