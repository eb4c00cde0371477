"""
Remote documents and the document loader contract.

A document loader is a callable ``loader(url, options)`` returning a
remote document, or an awaitable resolving to one. A remote document is
a dict::

    {
        'contentType': 'application/ld+json',
        'contextUrl': None,
        'documentUrl': 'http://example.com/context.jsonld',
        'document': {...}
    }

.. module:: ldcontext.remote
  :synopsis: Remote document loading
"""

import json
import re
from enum import Enum

from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.iri import resolve
from ldcontext.syntax import is_object, is_string

# JSON-LD link header rel
LINK_HEADER_REL = 'http://www.w3.org/ns/json-ld#context'

DEFAULT_ACCEPT = 'application/ld+json, application/json'


class Profile(Enum):
    """
    JSON-LD profiles a loader may request.
    """

    COMPACTED = 'compacted'
    CONTEXT = 'context'
    EXPANDED = 'expanded'
    FLATTENED = 'flattened'
    FRAME = 'frame'
    FRAMED = 'framed'

    @property
    def iri(self):
        return 'http://www.w3.org/ns/json-ld#' + self.value


def load_document_options(
        profile=None, request_profile=None, extract_all_scripts=False):
    """
    Builds the options passed to a document loader.

    :param profile: the Profile the loaded document is used as.
    :param request_profile: a Profile or list of Profiles to ask the server
      for; defaults to profile.
    :param extract_all_scripts: True to extract every JSON-LD script of an
      HTML document rather than the first.

    :return: the loader options.
    """
    if request_profile is None:
        request_profile = [profile] if profile is not None else []
    elif isinstance(request_profile, Profile):
        request_profile = [request_profile]
    accept = [
        'application/ld+json;profile=' + p.iri for p in request_profile]
    accept.append(DEFAULT_ACCEPT)
    return {
        'profile': profile,
        'requestProfile': request_profile,
        'extractAllScripts': extract_all_scripts,
        'headers': {'Accept': ', '.join(accept)}
    }


def read_remote_document(remote, url):
    """
    Validates what a document loader returned and parses a document given
    as JSON text.

    :param remote: the loader result.
    :param url: the URL that was loaded.

    :return: a remote document dict.
    """
    if not is_object(remote) or 'document' not in remote:
        raise JsonLdError(
            'Document loader returned an invalid remote document.',
            'jsonld.LoadDocumentError', {'url': url},
            code=ErrorCode.LOADING_DOCUMENT_FAILED)
    rval = {
        'contentType': remote.get('contentType'),
        'contextUrl': remote.get('contextUrl'),
        'documentUrl': remote.get('documentUrl') or url,
        'document': remote['document']
    }
    if is_string(rval['document']):
        try:
            rval['document'] = json.loads(rval['document'])
        except ValueError as cause:
            raise JsonLdError(
                'Could not parse JSON from the remote document.',
                'jsonld.LoadDocumentError', {'url': url},
                code=ErrorCode.LOADING_DOCUMENT_FAILED, cause=cause)
    return rval


def parse_link_header(header):
    """
    Parses a link header. The results will be key'd by the value of "rel".

    Link: <http://json-ld.org/contexts/person.jsonld>; \
      rel="http://www.w3.org/ns/json-ld#context"; type="application/ld+json"

    Parses as: {
      'http://www.w3.org/ns/json-ld#context': {
        target: http://json-ld.org/contexts/person.jsonld,
        type: 'application/ld+json'
      }
    }

    If there is more than one "rel" with the same IRI, then entries in the
    resulting map for that "rel" will be lists.

    :param header: the link header to parse.

    :return: the parsed result.
    """
    rval = {}
    # split on unbracketed/unquoted commas
    entries = re.findall(r'(?:<[^>]*?>|"[^"]*?"|[^,])+', header)
    r_link_header = r'\s*<([^>]*?)>\s*(?:;\s*(.*))?'
    r_params = r'(.*?)=(?:(?:"([^"]*?)")|([^"]*?))\s*(?:(?:;\s*)|$)'
    for entry in entries:
        match = re.search(r_link_header, entry)
        if not match:
            continue
        target, params = match.groups()
        result = {'target': target}
        for name, quoted, bare in re.findall(r_params, params or ''):
            result[name.strip()] = quoted if quoted else bare
        rel = result.get('rel', '')
        if isinstance(rval.get(rel), list):
            rval[rel].append(result)
        elif rel in rval:
            rval[rel] = [rval[rel], result]
        else:
            rval[rel] = result
    return rval


def apply_link_header(doc, url, link_header):
    """
    Records the context link of a response in doc['contextUrl'].

    :param doc: the remote document being built.
    :param url: the requested URL.
    :param link_header: the value of the Link header.

    :return: the absolute IRI of an alternate JSON-LD representation to
      follow, or None.
    """
    links = parse_link_header(link_header)
    content_type = doc['contentType']
    linked_context = links.get(LINK_HEADER_REL)
    # only 1 related link header permitted
    if linked_context and content_type != 'application/ld+json':
        if isinstance(linked_context, list):
            raise JsonLdError(
                'URL could not be dereferenced, it has more than one '
                'associated HTTP Link Header.', 'jsonld.LoadDocumentError',
                {'url': url}, code=ErrorCode.MULTIPLE_CONTEXT_LINK_HEADERS)
        doc['contextUrl'] = resolve(linked_context['target'], url)
    linked_alternate = links.get('alternate')
    # if not JSON-LD, alternate may point there
    if (isinstance(linked_alternate, dict) and
            linked_alternate.get('type') == 'application/ld+json' and
            not re.match(r'^application\/(\w*\+)?json$', content_type)):
        return resolve(linked_alternate['target'], url)
    return None


def dummy_document_loader(**kwargs):
    """
    Create a dummy document loader that will raise an exception on use.

    :param **kwargs: extra keyword args

    :return: the RemoteDocument loader function.
    """

    def loader(url, options=None):
        """
        Raises an exception on every call.

        :param url: the URL to retrieve.

        :return: the RemoteDocument.
        """
        raise JsonLdError(
            'No default document loader configured.',
            'jsonld.LoadDocumentError', {'url': url},
            code=ErrorCode.LOADING_DOCUMENT_FAILED)

    return loader
