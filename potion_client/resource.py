import re
from collections.abc import Mapping

from jsonschema import Draft4Validator, ValidationError

from .exceptions import InvalidDocument
from .link import Link

LINK_SCHEMA = {
    "type": "object",
    "properties": {
        "href": {"type": "string"},
        "templated": {"type": "boolean"}
    },
    "required": ["href"]
}

DOCUMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "_links": {
            "type": "object",
            "additionalProperties": {
                "anyOf": [
                    LINK_SCHEMA,
                    {"type": "array", "items": LINK_SCHEMA}
                ]
            }
        },
        "_embedded": {
            "type": "object",
            "additionalProperties": {
                "type": ["object", "array"]
            }
        }
    }
}

_validator = Draft4Validator(DOCUMENT_SCHEMA)


def relation_to_attribute(relation):
    """
    Converts a link relation or field name such as ``next-page`` or ``ea:find`` into an attribute name.
    """
    return re.sub(r'[^0-9a-zA-Z_]', '_', relation)


class Collection(Mapping):
    """
    A read-only mapping whose entries can also be read as attributes. Keys are looked up both as given and in their
    attribute form (see :func:`relation_to_attribute`).
    """

    def __init__(self, entries):
        self._entries = entries
        self._keys = {relation_to_attribute(key): key for key in entries}

    def __getitem__(self, key):
        if key not in self._entries:
            key = self._keys.get(key, key)
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError("'{}' object has no attribute '{}'".format(self.__class__.__name__, name))

    def __repr__(self):
        return '<{} {}>'.format(self.__class__.__name__, list(self._entries))


class Attributes(Collection):
    """
    The plain fields of a document; everything except the reserved ``_links`` and ``_embedded`` sections.
    """

    def __init__(self, representation):
        super(Attributes, self).__init__({key: value
                                          for key, value in representation.items()
                                          if not key.startswith('_')})


class LinkCollection(Collection):
    def __init__(self, links, entry_point):
        super(LinkCollection, self).__init__({relation: self._link(value, entry_point)
                                              for relation, value in links.items()})

    @staticmethod
    def _link(value, entry_point):
        if isinstance(value, list):
            return [Link(item, entry_point) for item in value]
        return Link(value, entry_point)


class ResourceCollection(Collection):
    def __init__(self, embedded, entry_point):
        super(ResourceCollection, self).__init__({relation: self._resource(value, entry_point)
                                                  for relation, value in embedded.items()})

    @staticmethod
    def _resource(value, entry_point):
        if isinstance(value, list):
            return [Resource(item, entry_point) for item in value]
        return Resource(value, entry_point)


class Resource(object):
    """
    A parsed HAL document.

    Fields, embedded resources and links are available through :attr:`attributes`, :attr:`embedded` and
    :attr:`links`, and directly as attributes of the resource, looked up in that order.

    :param dict representation: the decoded document; ``None`` is treated as an empty document
    :param entry_point: the :class:`potion_client.entry_point.EntryPoint` used by the links of this resource
    :raises InvalidDocument: if the ``_links`` or ``_embedded`` sections are malformed
    """

    def __init__(self, representation, entry_point):
        if representation is None:
            representation = {}

        try:
            _validator.validate(representation)
        except ValidationError:
            raise InvalidDocument(list(_validator.iter_errors(representation)))

        self.entry_point = entry_point
        self._attributes = Attributes(representation)
        self._links = LinkCollection(representation.get('_links', {}), entry_point)
        self._embedded = ResourceCollection(representation.get('_embedded', {}), entry_point)

    @property
    def attributes(self):
        return self._attributes

    @property
    def links(self):
        return self._links

    @property
    def embedded(self):
        return self._embedded

    @property
    def self_link(self):
        return self._links.get('self')

    def _collections(self):
        return self._attributes, self._embedded, self._links

    def __getattr__(self, name):
        if not name.startswith('_'):
            for collection in self._collections():
                if name in collection:
                    return collection[name]
        raise AttributeError("'{}' object has no attribute '{}'".format(self.__class__.__name__, name))

    def __contains__(self, name):
        return any(name in collection for collection in self._collections())

    def __repr__(self):
        link = self.self_link
        if isinstance(link, Link):
            return '<{} {!r}>'.format(self.__class__.__name__, link.template.get('href'))
        return '<{}>'.format(self.__class__.__name__)
