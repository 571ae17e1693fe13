"""
feed_service tests

Covers the backend of the social feed service:

- FastAPI application and account routes (`main.py`)
- Feed, profile, navbar and health routers (`routes/`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Password hashing and bearer token logic (`auth.py`)
- Error mapping and activity logging (`errors.py`, `utils/activity_logger.py`)
"""
