"""
Time unit constants expressed in milliseconds.

Rates are kept per millisecond internally; multiply by one of these to
convert into the caller's unit (e.g. ``ewma.rate(SECONDS)``).
"""

NANOSECONDS = 1 / (1000 * 1000)
MICROSECONDS = 1 / 1000
MILLISECONDS = 1
SECONDS = 1000 * MILLISECONDS
MINUTES = 60 * SECONDS
HOURS = 60 * MINUTES
DAYS = 24 * HOURS
