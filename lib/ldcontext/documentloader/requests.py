"""
Remote document loader using Requests.

The blocking Requests call runs in the event loop's default executor so
the loader can be awaited like any other.

.. module:: ldcontext.documentloader.requests
  :synopsis: Remote document loader using Requests

.. moduleauthor:: Dave Longley
.. moduleauthor:: Mike Johnson
.. moduleauthor:: Tim McNamara <tim.mcnamara@okfn.org>
.. moduleauthor:: Olaf Conradi <olaf@conradi.org>
"""
import asyncio
import functools
import string
import urllib.parse as urllib_parse

from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.remote import DEFAULT_ACCEPT, apply_link_header


def requests_document_loader(secure=False, max_link_follows=2, **kwargs):
    """
    Create a Requests document loader.
    Can be used to setup extra Requests args such as verify, cert, timeout,
    or others.
    :param secure: require all requests to use HTTPS (default: False).
    :param max_link_follows: Maximum number of alternate link follows allowed.
    :param **kwargs: extra keyword args for Requests get() call.
    :return: the RemoteDocument loader coroutine function.
    """
    import requests

    def load(url, options, link_follow_count=0):
        """
        Retrieves JSON-LD at the given URL.
        :param url: the URL to retrieve.
        :return: the RemoteDocument.
        """
        try:
            # validate URL
            pieces = urllib_parse.urlparse(url)
            if (not all([pieces.scheme, pieces.netloc]) or
                    pieces.scheme not in ['http', 'https'] or
                    set(pieces.netloc) > set(
                        string.ascii_letters + string.digits + '-.:')):
                raise JsonLdError(
                    'URL could not be dereferenced; only "http" and "https" '
                    'URLs are supported.',
                    'jsonld.InvalidUrl', {'url': url},
                    code=ErrorCode.LOADING_DOCUMENT_FAILED)
            if secure and pieces.scheme != 'https':
                raise JsonLdError(
                    'URL could not be dereferenced; secure mode enabled and '
                    'the URL\'s scheme is not "https".',
                    'jsonld.InvalidUrl', {'url': url},
                    code=ErrorCode.LOADING_DOCUMENT_FAILED)
            headers = options.get('headers') or {'Accept': DEFAULT_ACCEPT}
            response = requests.get(url, headers=headers, **kwargs)
            response.raise_for_status()

            content_type = response.headers.get('content-type')
            if not content_type:
                content_type = 'application/octet-stream'
            doc = {
                'contentType': content_type,
                'contextUrl': None,
                'documentUrl': response.url,
                'document': None
            }
            link_header = response.headers.get('link')
            if link_header:
                alternate = apply_link_header(doc, url, link_header)
                if alternate:
                    if link_follow_count >= max_link_follows:
                        raise requests.TooManyRedirects(
                            'Exceeded maximum link header redirects '
                            f'({max_link_follows})')
                    return load(alternate, options, link_follow_count + 1)
            doc['document'] = response.json()
            return doc
        except JsonLdError as e:
            raise e
        except Exception as cause:
            raise JsonLdError(
                'Could not retrieve a JSON-LD document from the URL.',
                'jsonld.LoadDocumentError', {'url': url},
                code=ErrorCode.LOADING_DOCUMENT_FAILED, cause=cause)

    async def loader(url, options=None):
        """
        Retrieves JSON-LD at the given URL without blocking the event loop.
        :param url: the URL to retrieve.
        :param options: the load options; 'headers' overrides the request
          headers.
        :return: the RemoteDocument.
        """
        return await asyncio.get_running_loop().run_in_executor(
            None, functools.partial(load, url, options or {}))

    return loader
