import abc
import logging

logger = logging.getLogger(__name__)


class Context(abc.ABC):
    """Transaction handle passed into every identifier operation.

    Usable as a context manager: commit on clean exit, abort when the block
    raises.
    """

    @abc.abstractmethod
    def commit(self):
        """Make pending metadata changes durable. Raises PersistenceError on failure."""
        pass

    @abc.abstractmethod
    def abort(self):
        """Discard pending metadata changes."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.debug('Aborting transaction after %s', exc_type.__name__)
            self.abort()
            return False
        self.commit()
        return False
