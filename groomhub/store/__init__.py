"""
Document store backing the service.

Each collection (salons, professionals, reviews, service items, categories,
salesmen, bookings) is held as a pandas DataFrame loaded from a JSON seed.
"""
