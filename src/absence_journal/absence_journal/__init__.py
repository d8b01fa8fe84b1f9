"""Absence Journal package.

This package is organized by feature modules (roster, absences, reports, ...)
with a thin Flask controller layer and service/repository layers.
"""
