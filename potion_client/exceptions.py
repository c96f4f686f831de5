from werkzeug.http import HTTP_STATUS_CODES


class PotionClientException(Exception):
    pass


class MissingURITemplateVariablesException(PotionClientException):
    """
    Raised when the URL of a templated :class:`Link` is needed but the link was never expanded.
    """
    message = "The URL to this links is templated, but no variables where given."

    def __init__(self):
        super(MissingURITemplateVariablesException, self).__init__(self.message)


class HTTPError(PotionClientException):

    def __init__(self, status_code, url, body=None):
        super(HTTPError, self).__init__('{} {} ({})'.format(status_code, self.reason(status_code), url))
        self.status_code = status_code
        self.url = url
        self.body = body

    @staticmethod
    def reason(status_code):
        return HTTP_STATUS_CODES.get(status_code, '')

    def as_dict(self):
        return {
            'status': self.status_code,
            'message': self.reason(self.status_code),
            'url': self.url
        }


class InvalidDocument(PotionClientException):

    def __init__(self, errors):
        super(InvalidDocument, self).__init__('Invalid hypermedia document')
        self.errors = errors

    def _format_errors(self):
        for error in self.errors:
            yield {
                'validationOf': {error.validator: error.validator_value},
                'path': tuple(error.absolute_path),
                'message': error.message
            }

    def as_dict(self):
        return {'errors': list(self._format_errors())}
