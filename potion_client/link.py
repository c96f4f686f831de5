import logging
import threading

import uritemplate
from werkzeug.utils import cached_property

from .exceptions import MissingURITemplateVariablesException

logger = logging.getLogger(__name__)


class Link(object):
    """
    A single hypermedia link, as found in the ``_links`` section of a HAL document.

    A :class:`Link` knows how to build its URL, how to issue requests against it and how to resolve itself into
    the :class:`potion_client.resource.Resource` it points to. Any attribute not defined here is looked up on that
    resource, fetching it on first use, so that ``api.posts.first`` works without writing ``.resource`` at every hop.

    Every request method returns a :class:`concurrent.futures.Future`. The request is sent as soon as the method is
    called; calling ``result()`` on the future waits for the response.

    :param dict template: the link descriptor, e.g. ``{"href": "/posts/{id}", "templated": true}``
    :param entry_point: the :class:`potion_client.entry_point.EntryPoint` supplying the connection
    :param dict uri_variables: variables used to expand a templated link
    """

    def __init__(self, template, entry_point, uri_variables=None):
        self.template = template
        self.entry_point = entry_point
        self.uri_variables = uri_variables
        self._resource = None
        self._resource_lock = threading.Lock()

    @property
    def templated(self):
        return bool(self.template.get('templated'))

    def expand(self, uri_variables=None, **kwargs):
        """
        Returns a new :class:`Link` for the same descriptor, to be expanded with the given variables. The link
        this is called on is not changed.

        :param dict uri_variables: variables used to expand the URI template
        :param kwargs: further variables, merged with ``uri_variables``
        """
        if kwargs:
            uri_variables = dict(uri_variables or {}, **kwargs)
        return type(self)(self.template, self.entry_point, uri_variables)

    @property
    def url(self):
        """
        The URL of the link. Templated links are expanded using :attr:`uri_variables`.

        :raises MissingURITemplateVariablesException: if the link is templated and was never given variables
        """
        if not self.templated:
            return self.template['href']

        if self.uri_variables is None:
            raise MissingURITemplateVariablesException()
        return self._expanded_url

    @cached_property
    def _expanded_url(self):
        return uritemplate.expand(self.template['href'], self.uri_variables)

    @property
    def resource(self):
        """
        The resource this link points to. Fetched with a GET request the first time it is needed.
        """
        return self._resolve()

    def _resolve(self):
        from .resource import Resource

        with self._resource_lock:
            if self._resource is None:
                response = self.get().result()
                logger.debug('Resolved %r from %s', self, response.url)
                self._resource = Resource(response.body, self.entry_point)
        return self._resource

    @property
    def connection(self):
        return self.entry_point.connection

    def _submit(self, fn):
        return self.entry_point.executor.submit(fn)

    def get(self):
        return self._submit(lambda: self.connection.get(self.url))

    def options(self):
        return self._submit(lambda: self.connection.run_request('OPTIONS', self.url, None, None))

    def head(self):
        return self._submit(lambda: self.connection.head(self.url))

    def delete(self):
        return self._submit(lambda: self.connection.delete(self.url))

    def post(self, params):
        return self._submit(lambda: self.connection.post(self.url, params))

    def put(self, params):
        return self._submit(lambda: self.connection.put(self.url, params))

    def patch(self, params):
        return self._submit(lambda: self.connection.patch(self.url, params))

    def __getattr__(self, name):
        # class-level names reach here only when their own lookup raised AttributeError
        if name.startswith('_') or hasattr(type(self), name):
            raise AttributeError(name)
        return getattr(self._resolve(), name)

    def __contains__(self, name):
        return name in self._resolve()

    def __repr__(self):
        return '<{} {!r}>'.format(self.__class__.__name__, self.template)
