"""
High-level use cases for the shipment API.

Each service module orchestrates the store to implement the business rules
(validate, assign ids and timestamps, locate records). Routers call these
services instead of manipulating the JSON file directly.
"""
