"""Infrastructure layer: persistence, clock, identity, and fund transfers.

This layer depends on stdlib and third-party libs (SQLAlchemy).
The service layer bridges between domain rules and infrastructure.
"""
