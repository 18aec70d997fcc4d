"""Workforce HR back office.

This package is organized by feature modules (employees, vacations,
time_entries, overtime, inventory, documents, payroll, ...) with a thin Flask
controller layer over service/repository layers.
"""
