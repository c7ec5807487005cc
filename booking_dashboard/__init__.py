"""
Rental Calendar Dashboard.

Calendar window paging, reservation grouping and parent/child property
relationships for a multi-property rental dashboard backed by Supabase,
with iCal synchronisation against Airbnb, Booking and Vrbo.
"""

__version__ = "1.0.0"
__author__ = "Rental Calendar Team"
__description__ = "Reservation calendar and iCal sync backend for rental properties"
