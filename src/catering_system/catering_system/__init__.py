"""Catering System package.

Meal attendance engine for schools and daycares, organized by feature modules
(caterings, groups, students, cancellations, attendance) with a thin Flask
controller layer over service/repository layers.
"""
