"""QA test-plan generation from customer feature-flag configurations.

Combines the flag document with the scenario library into one CSV test
plan per customer.
"""

__version__ = "1.2.0"
