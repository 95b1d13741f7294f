"""Bookings app package.

This app encapsulates the booking engine: availability checks, rate
selection and price breakdowns, and the reservation committer that
writes PENDING reservations to the ledger. Overlapping reservations of
the same vehicle are prevented with a per-listing row lock and, on
PostgreSQL, an exclusion constraint.
"""
