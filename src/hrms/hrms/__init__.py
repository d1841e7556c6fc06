"""HRMS package.

This package is organized by feature modules (employees, attendance, leaves,
approvals, payroll, gps, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
