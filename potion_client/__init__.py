from .entry_point import EntryPoint
from .link import Link
from .resource import Resource
from .exceptions import PotionClientException, MissingURITemplateVariablesException, HTTPError, InvalidDocument

__all__ = (
    'EntryPoint',
    'Link',
    'Resource',
    'PotionClientException',
    'MissingURITemplateVariablesException',
    'HTTPError',
    'InvalidDocument',
    'connection',
    'signals'
)
