"""Payroll back office package.

Organized by feature modules (attendance, leave, payroll, reports, ...) with a
thin Flask controller layer on top of service/repository layers.
"""
