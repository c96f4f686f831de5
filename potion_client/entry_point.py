import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from werkzeug.utils import cached_property

from .connection import Connection, FlaskConnection
from .link import Link

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'application/hal+json,application/json',
    'Content-Type': 'application/json'
}


class EntryPoint(object):
    """
    The root of an API. Holds the connection and the executor shared by every :class:`Link` reached from it.

    Attributes not defined here are looked up on the root document, so ``api.posts`` fetches the root and follows
    its ``posts`` link.

    The following configuration keys are read; missing keys are filled in with their defaults:

    ``POTION_CLIENT_MAX_WORKERS``
        number of threads sending requests (default ``8``)
    ``POTION_CLIENT_TIMEOUT``
        request timeout in seconds (default ``None``)
    ``POTION_CLIENT_HEADERS``
        headers sent with every request

    :param str url: URL of the API root
    :param connection: an optional connection; defaults to a :class:`potion_client.connection.Connection` to ``url``.
        Headers are added to a supplied connection without replacing the ones it already has; its timeout is its own.
    :param dict headers: extra headers sent with every request
    :param dict config: an optional configuration mapping
    """

    def __init__(self, url, connection=None, headers=None, config=None):
        self.url = url
        self.config = config if config is not None else {}
        self.config.setdefault('POTION_CLIENT_MAX_WORKERS', 8)
        self.config.setdefault('POTION_CLIENT_TIMEOUT', None)
        self.config.setdefault('POTION_CLIENT_HEADERS', dict(DEFAULT_HEADERS))

        self.headers = dict(self.config['POTION_CLIENT_HEADERS'])
        self.headers.update(headers or {})

        if connection is None:
            connection = Connection(url, headers=self.headers, timeout=self.config['POTION_CLIENT_TIMEOUT'])
        else:
            for key, value in self.headers.items():
                connection.headers.setdefault(key, value)
        self.connection = connection

        self._executor = None
        self._executor_lock = threading.Lock()

    @classmethod
    def from_app(cls, app, url='/', headers=None):
        """
        Creates an :class:`EntryPoint` for a :class:`flask.Flask` application, sending requests to it in-process
        and reading configuration from ``app.config``.

        :param app: a :class:`Flask` instance
        :param str url: path of the API root
        :param dict headers: extra headers sent with every request
        """
        return cls(url, connection=FlaskConnection(app), headers=headers, config=app.config)

    @cached_property
    def link(self):
        return Link({'href': self.url}, self)

    @property
    def executor(self):
        with self._executor_lock:
            if self._executor is None:
                max_workers = self.config['POTION_CLIENT_MAX_WORKERS']
                logger.debug('Starting executor with %s workers for %s', max_workers, self.url)
                self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                                    thread_name_prefix='potion-client')
        return self._executor

    def close(self):
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None
        self.connection.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def __getattr__(self, name):
        if name.startswith('_') or hasattr(type(self), name):
            raise AttributeError(name)
        return getattr(self.link, name)

    def __contains__(self, name):
        return name in self.link

    def __repr__(self):
        return '<{} {!r}>'.format(self.__class__.__name__, self.url)
