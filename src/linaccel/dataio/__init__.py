"""Data input/output helpers (CSV sample logs).

Utility modules here keep disk-level concerns isolated from the rest of the
application:
- :mod:`csv_writer` records samples received by a session.
- :mod:`log_loader` parses recorded logs and replays them offline.
"""
