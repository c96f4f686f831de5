import logging

import requests
from flask import json
from rfc3987 import resolve

from . import signals
from .exceptions import HTTPError

logger = logging.getLogger(__name__)


def _decode(content):
    if not content:
        return None
    try:
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return json.loads(content)
    except ValueError:
        return content


class Response(object):
    """
    The transport-independent result of a request.

    :param int status_code: HTTP status code
    :param headers: response headers
    :param body: the decoded JSON body, the text of a non-JSON body, the raw bytes if it is not UTF-8 text, or ``None`` if it is empty
    :param str url: the URL the request was sent to
    """

    def __init__(self, status_code, headers, body, url):
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self.url = url

    def __repr__(self):
        return '<Response [{}] {}>'.format(self.status_code, self.url)


class BaseConnection(object):
    """
    Issues requests on behalf of :class:`potion_client.link.Link` instances.

    The named verb methods cover the common cases; :meth:`run_request` is used for any other verb.
    Subclasses implement :meth:`_send`.

    :param dict headers: headers sent with every request
    """

    def __init__(self, headers=None):
        self.headers = dict(headers or {})

    def get(self, url):
        return self.run_request('GET', url, None, None)

    def head(self, url):
        return self.run_request('HEAD', url, None, None)

    def delete(self, url):
        return self.run_request('DELETE', url, None, None)

    def post(self, url, body=None):
        return self.run_request('POST', url, body, None)

    def put(self, url, body=None):
        return self.run_request('PUT', url, body, None)

    def patch(self, url, body=None):
        return self.run_request('PATCH', url, body, None)

    def run_request(self, method, url, body, headers):
        method = method.upper()
        url = self.resolve_url(url)

        request_headers = dict(self.headers)
        request_headers.update(headers or {})
        data = json.dumps(body) if body is not None else None

        signals.before_request.send(self, method=method, url=url, body=body)
        logger.debug('%s %s', method, url)

        status_code, response_headers, content = self._send(method, url, data, request_headers)
        response = Response(status_code, response_headers, _decode(content), url)

        logger.debug('%s %s returned %s', method, url, status_code)
        signals.after_request.send(self, method=method, url=url, response=response)

        if status_code >= 400:
            raise HTTPError(status_code, url, response.body)
        return response

    def resolve_url(self, url):
        return url

    def _send(self, method, url, data, headers):
        raise NotImplementedError()

    def close(self):
        pass


class Connection(BaseConnection):
    """
    A connection to a remote API using a :class:`requests.Session`.

    Relative link targets are resolved against ``url``.

    :param str url: absolute base URL of the API
    :param dict headers: headers sent with every request
    :param timeout: optional timeout in seconds passed on to :mod:`requests`
    :param session: an optional :class:`requests.Session` to use
    """

    def __init__(self, url, headers=None, timeout=None, session=None):
        super(Connection, self).__init__(headers)
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve_url(self, url):
        return resolve(self.url, url)

    def _send(self, method, url, data, headers):
        response = self.session.request(method, url,
                                        data=data,
                                        headers=headers,
                                        timeout=self.timeout)
        return response.status_code, response.headers, response.content

    def close(self):
        self.session.close()


class FlaskConnection(BaseConnection):
    """
    A connection that sends requests to a :class:`flask.Flask` application in-process, using its test client.

    :param app: a :class:`Flask` instance
    :param dict headers: headers sent with every request
    """

    def __init__(self, app, headers=None):
        super(FlaskConnection, self).__init__(headers)
        self.app = app
        self.client = app.test_client()

    def _send(self, method, url, data, headers):
        response = self.client.open(url, method=method, data=data, headers=headers)
        return response.status_code, response.headers, response.get_data()
