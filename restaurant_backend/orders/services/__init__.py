"""
ORDERS SERVICES

Import the concrete modules directly (orders.services.order_number,
orders.services.order_status, ...). This package stays import-light so that
other apps can depend on orders.services.business_date without pulling in
the order-creation graph.
"""
