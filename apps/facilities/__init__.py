"""Facilities app package.

Holds the facility registry: bookable resources of a club (fields,
courts, halls) together with their concurrent booking capacity.
"""
