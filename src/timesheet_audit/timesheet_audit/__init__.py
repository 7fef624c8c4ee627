"""Timesheet Audit package.

Work-time tracking core organised by feature modules (ledger, compliance,
time_entries) with a thin Flask controller layer over service/repository
layers. The ledger is hash-chained so recorded time data can be proven
unaltered after the fact.
"""
