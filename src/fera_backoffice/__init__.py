"""Fera Service back-office package.

This package is organized by feature modules (attendance, payroll, production,
finance, inventory, ...) with a thin Flask controller layer over service
modules and a single record-store seam to the hosted backend.
"""

__version__ = "0.4.0"
