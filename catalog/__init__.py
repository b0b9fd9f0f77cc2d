"""
Local Library Catalog Package

Server-rendered catalog of authors, books, genres and book copies.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and store configuration
- exceptions.py: Error kinds surfaced to the HTTP layer
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models with computed display fields
- services/: Entity store, validation rules, aggregation, form pipeline
- controllers/: Per-entity form controller configurations
- routers/: HTML route handlers
- rendering.py: Jinja2 view renderer
"""

__version__ = "0.1.0"
