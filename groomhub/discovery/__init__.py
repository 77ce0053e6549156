"""
Geo-aware provider discovery.

Responsibilities:
- Restrict salons / independent professionals to a radius around the customer.
- Apply category compatibility and attach ratings and popular services.
- Order the survivors (nearest first, or best rated) and cut one page.
"""
