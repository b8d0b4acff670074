"""Persistence layer exceptions.

Repositories translate SQLAlchemy errors into these so services and the
backfill never depend on driver exception types. Salary shape errors are not
persistence errors: writing a legacy salary raises
``jobboard.salary.InvalidSalary`` before the database is touched.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors.

    The backfill catches this per record: a record whose update raises it is
    rolled back to its savepoint and reported as failed.
    """

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be opened or used.

    Examples:
    - Empty or malformed database URL
    - Database file or directory not writable
    - SQLite build without the JSON1 functions salary queries need
    - Session requested before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an update or delete targets a job or application that does not exist.

    Lookups return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations.

    Examples:
    - Registering an email that is already taken
    - Applying to the same job twice
    - A job or application referencing a missing user
    """

    pass
