"""Shift Tracker package.

Feature modules (users, time_entries, payslips, days_off, petty_cash, ...)
sit behind a thin Flask controller layer, with service/repository layers
doing the actual work.
"""
