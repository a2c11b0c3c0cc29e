# feedlot/services/base.py
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from feedlot.exceptions import RepositoryError
from feedlot.extensions import db


class BaseService:
    """Base class for all services.

    Writes are flushed, not committed: the caller decides where the
    transaction ends. Store failures roll the session back and surface as
    RepositoryError.
    """

    model = None

    def get(self, id, model=None):
        """Get a record by ID."""
        model = model or self.model
        if not id:
            return None
        try:
            return db.session.get(model, id)
        except SQLAlchemyError as e:
            self._fail(f"Error loading {model.__name__} '{id}'", e)

    def get_all(self, model=None):
        """Get all records."""
        model = model or self.model
        try:
            return model.query.all()
        except SQLAlchemyError as e:
            self._fail(f"Error listing {model.__name__}", e)

    def create(self, model=None, **kwargs):
        """Create a new record."""
        model = model or self.model
        try:
            instance = model(**kwargs)
            db.session.add(instance)
            db.session.flush()
            return instance
        except SQLAlchemyError as e:
            self._fail(f"Error creating {model.__name__}", e)

    def update(self, instance, **kwargs):
        """Update an existing record."""
        try:
            for key, value in kwargs.items():
                if hasattr(instance, key):
                    setattr(instance, key, value)
            db.session.flush()
            return instance
        except SQLAlchemyError as e:
            self._fail(f"Error updating {type(instance).__name__}", e)

    def commit(self):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            self._fail("Error committing transaction", e)

    def rollback(self):
        db.session.rollback()

    def _fail(self, message, error):
        db.session.rollback()
        current_app.logger.error(f"{message}: {str(error)}", exc_info=error)
        raise RepositoryError(message) from error
