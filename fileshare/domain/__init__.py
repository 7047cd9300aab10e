"""Domain layer - core business logic and interfaces.

This layer contains:
- Domain entities (messages and file descriptors)
- Repository interfaces (message store)
- Infrastructure interfaces (file sink, broadcast channel)
"""
