"""
Remote document loader using aiohttp.

.. module:: ldcontext.documentloader.aiohttp
  :synopsis: Remote document loader using aiohttp

.. moduleauthor:: Olaf Conradi <olaf@conradi.org>
"""

import json
import string
import urllib.parse as urllib_parse

from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.remote import DEFAULT_ACCEPT, apply_link_header


def aiohttp_document_loader(secure=False, max_link_follows=2, **kwargs):
    """
    Create an asynchronous document loader using aiohttp.

    :param secure: require all requests to use HTTPS (default: False).
    :param max_link_follows: Maximum number of alternate link follows allowed.
    :param **kwargs: extra keyword args for the aiohttp request get() call.

    :return: the RemoteDocument loader coroutine function.
    """
    import aiohttp

    async def loader(url, options=None, link_follow_count=0):
        """
        Retrieves JSON-LD at the given URL asynchronously.

        :param url: the URL to retrieve.
        :param options: the load options; 'headers' overrides the request
          headers.

        :return: the RemoteDocument.
        """
        if options is None:
            options = {}
        headers = options.get('headers') or {'Accept': DEFAULT_ACCEPT}
        try:
            # validate URL
            pieces = urllib_parse.urlparse(url)
            if (not all([pieces.scheme, pieces.netloc]) or
                pieces.scheme not in ['http', 'https'] or
                set(pieces.netloc) > set(
                    string.ascii_letters + string.digits + '-.:')):
                raise JsonLdError(
                    'URL could not be dereferenced; '
                    'only "http" and "https" URLs are supported.',
                    'jsonld.InvalidUrl', {'url': url},
                    code=ErrorCode.LOADING_DOCUMENT_FAILED)
            if secure and pieces.scheme != 'https':
                raise JsonLdError(
                    'URL could not be dereferenced; '
                    'secure mode enabled and '
                    'the URL\'s scheme is not "https".',
                    'jsonld.InvalidUrl', {'url': url},
                    code=ErrorCode.LOADING_DOCUMENT_FAILED)
            async with aiohttp.ClientSession() as session:
                async with session.get(url,
                                       headers=headers,
                                       **kwargs) as response:
                    response.raise_for_status()
                    content_type = response.headers.get('content-type')
                    if not content_type:
                        content_type = 'application/octet-stream'
                    body = await response.text()
                    link_header = response.headers.get('link')
                    document_url = response.url.human_repr()

            doc = {
                'contentType': content_type,
                'contextUrl': None,
                'documentUrl': document_url,
                'document': None
            }
            alternate = None
            if link_header:
                alternate = apply_link_header(doc, url, link_header)
            if alternate:
                if link_follow_count >= max_link_follows:
                    raise JsonLdError(
                        'Exceeded maximum link header redirects '
                        f'({max_link_follows}).', 'jsonld.LoadDocumentError',
                        {'url': url}, code=ErrorCode.LOADING_DOCUMENT_FAILED)
                return await loader(
                    alternate, options=options,
                    link_follow_count=link_follow_count + 1)
            doc['document'] = json.loads(body)
            return doc
        except JsonLdError as e:
            raise e
        except Exception as cause:
            raise JsonLdError(
                'Could not retrieve a JSON-LD document from the URL.',
                'jsonld.LoadDocumentError', {'url': url},
                code=ErrorCode.LOADING_DOCUMENT_FAILED, cause=cause)

    return loader
