"""Timekeeping package.

Reconciles biometric punches and approved HR requests into processed
attendance rows, and rolls those rows up into semi-monthly payroll
summaries. Organized by feature modules with a thin Flask controller layer
over service/repository layers.
"""
