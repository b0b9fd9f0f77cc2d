"""
Test Suite for the Library Catalog

Test Organization:
- conftest.py: Shared fixtures (per-test SQLite file, client, sample records)
- test_validation.py / test_aggregation.py: pure building blocks
- test_models.py / test_store.py: computed fields and CRUD
- test_authors.py, test_books.py, test_genres.py, test_book_instances.py:
  the HTML form flows of each entity
- test_catalog.py: home page, health check and error pages

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_books.py -v
"""
