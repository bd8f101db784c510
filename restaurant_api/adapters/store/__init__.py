"""Restaurant store adapters.

Services depend on ``AbstractRestaurantStore``; ``create_restaurant_store``
picks the PostgreSQL or in-memory backend from settings.
"""
