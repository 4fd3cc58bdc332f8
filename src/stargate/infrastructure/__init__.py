"""Infrastructure layer — SQLite engine, schema, repositories, and the Store.

This layer depends on stdlib, SQLAlchemy, and the domain records it
persists. It must never import from services, commands, or output.
"""
