# ===============================================================================
# TEST FACTORIES - CENTRALIZED TEST DATA GENERATION
# ===============================================================================
"""
Factory module for generating test data across the LumiCloud platform.

Usage:
    from tests.factories import create_admin, create_customer, create_website

    admin = create_admin()
    customer = create_customer(email="john@example.com")
    website = create_website(customer)
"""

from tests.factories.lifecycle_factories import (
    create_admin,
    create_customer,
    create_customer_user,
    create_database,
    create_website,
)

__all__ = [
    'create_admin',
    'create_customer',
    'create_customer_user',
    'create_database',
    'create_website',
]
