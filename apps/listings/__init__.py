"""Listings app package.

This app holds the rentable vehicles together with the terms the booking
engine reads: the rate table, the rental policy (duration, notice and
delivery limits) and owner-defined blackout windows.
"""
