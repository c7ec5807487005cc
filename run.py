#!/usr/bin/env python3
"""
CLI entry point for the Rental Calendar Dashboard.
"""
from booking_dashboard.main import main

if __name__ == "__main__":
    main()
