import threading
from unittest import TestCase

from flask import Flask, json, jsonify, request

from potion_client import EntryPoint
from potion_client.connection import BaseConnection


class StubConnection(BaseConnection):
    """
    Answers every request from a dictionary of ``{url: body}`` and records the requests it receives.
    Unknown URLs return ``{}``; URLs listed in ``errors`` return the given status code.
    """

    def __init__(self, responses=None, errors=None):
        super(StubConnection, self).__init__()
        self.responses = responses or {}
        self.errors = errors or {}
        self.requests = []
        self._lock = threading.Lock()

    def _send(self, method, url, data, headers):
        with self._lock:
            self.requests.append((method, url, json.loads(data) if data else None))

        if url in self.errors:
            return self.errors[url], {}, json.dumps({'status': self.errors[url]})
        return 200, {}, json.dumps(self.responses.get(url, {}))

    def count(self, method=None, url=None):
        return len([r for r in self.requests
                    if (method is None or r[0] == method) and (url is None or r[1] == url)])


POSTS = {
    1: {'title': 'Hello', 'author': 'alice'},
    2: {'title': 'Goodbye', 'author': 'bob'},
}


def _post(id):
    post = POSTS[id]
    return {
        '_links': {
            'self': {'href': '/posts/{}'.format(id)},
            'author': {'href': '/authors/{}'.format(post['author'])}
        },
        'id': id,
        'title': post['title']
    }


class BaseTestCase(TestCase):

    def create_app(self):
        app = Flask(__name__)
        app.secret_key = 'XXX'
        app.debug = True

        @app.route('/')
        def root():
            return jsonify({
                '_links': {
                    'self': {'href': '/'},
                    'posts': {'href': '/posts'},
                    'post': {'href': '/posts/{id}', 'templated': True},
                    'search': {'href': '/posts{?q}', 'templated': True}
                },
                'title': 'Blog'
            })

        @app.route('/posts', methods=['GET', 'POST'])
        def posts():
            if request.method == 'POST':
                return jsonify(dict(request.get_json(), id=3)), 201

            q = request.args.get('q')
            items = [_post(id) for id in sorted(POSTS) if q is None or q in POSTS[id]['title']]
            return jsonify({
                '_links': {
                    'self': {'href': '/posts'},
                    'first': {'href': '/posts/1'},
                    'items': [{'href': '/posts/{}'.format(id)} for id in sorted(POSTS)]
                },
                '_embedded': {
                    'posts': items
                },
                'count': len(items)
            })

        @app.route('/posts/<int:id>', methods=['GET', 'PUT', 'PATCH', 'DELETE'])
        def post(id):
            if id not in POSTS:
                return jsonify({'status': 404, 'message': 'Not Found'}), 404
            if request.method == 'DELETE':
                return '', 204
            if request.method in ('PUT', 'PATCH'):
                return jsonify(dict(_post(id), **request.get_json()))
            return jsonify(_post(id))

        @app.route('/authors/<name>')
        def author(name):
            return jsonify({
                '_links': {'self': {'href': '/authors/{}'.format(name)}},
                'name': name
            })

        return app

    def setUp(self):
        self.app = self.create_app()
        self.api = EntryPoint.from_app(self.app)

    def tearDown(self):
        self.api.close()

    def stub_entry_point(self, responses=None, errors=None):
        entry_point = EntryPoint('http://example.com/', connection=StubConnection(responses, errors))
        self.addCleanup(entry_point.close)
        return entry_point
