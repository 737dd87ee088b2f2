"""
Calendar domain logic

Pure functions without ORM access:
- layout: time-grid positions and overlap columns for one day
- reschedule: drag/drop and resize time computations
- periods: which days a calendar view shows and how it pages
"""
