"""
Todo service package.

Transactional record store for todo items exposed over FastAPI. Build an
application with `todo_service.main.create_app`, or serve the default one
with `python -m todo_service`.
"""
