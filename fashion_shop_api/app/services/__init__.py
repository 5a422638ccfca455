"""
Service layer.

Each service encapsulates the business logic for one concern and is
bound to the record store it operates on.
"""
