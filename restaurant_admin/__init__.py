"""
                Restaurant Admin API

Record-keeping backend for restaurant operations: menu catalog,
customer orders with frozen pricing, and sales analytics.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
