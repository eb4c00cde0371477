"""
JSON-LD context processor configuration and API.

.. module:: ldcontext.processor
  :synopsis: Processor options, document loaders and the public API

.. moduleauthor:: Dave Longley
.. moduleauthor:: Olaf Conradi <olaf@conradi.org>
"""

import asyncio
import inspect

from ldcontext.context import ActiveContext
from ldcontext.iri import is_absolute_iri, resolve
from ldcontext.nullable import NULL
from ldcontext.remote import (
    dummy_document_loader, load_document_options, read_remote_document)
from ldcontext.syntax import KEYWORDS

# Restraints
MAX_CONTEXT_URLS = 10

PROCESSING_MODES = ('json-ld-1.0', 'json-ld-1.1')


def set_document_loader(load_document):
    """
    Sets the default JSON-LD document loader.

    :param load_document(url, options): the document loader to use.
    """
    global _default_document_loader
    _default_document_loader = load_document


def get_document_loader():
    """
    Gets the default JSON-LD document loader.

    :return: the default document loader.
    """
    return _default_document_loader


def requests_document_loader(**kwargs):
    import ldcontext.documentloader.requests

    return ldcontext.documentloader.requests.requests_document_loader(
        **kwargs)


def aiohttp_document_loader(**kwargs):
    import ldcontext.documentloader.aiohttp

    return ldcontext.documentloader.aiohttp.aiohttp_document_loader(**kwargs)


class Processor(object):
    """
    Holds the options shared by every algorithm of one processing run:
    the document IRI, the processing mode and the document loader.
    """

    def __init__(self, options=None):
        """
        Creates a Processor.

        :param options: the options to use:
          [base] the document IRI (default: None).
          [documentLoader(url, options)] the document loader
            (default: _default_document_loader).
          [processingMode] 'json-ld-1.0' or 'json-ld-1.1'
            (default: 'json-ld-1.1').
          [maxRemoteContexts] the maximum number of remote contexts
            dereferenced in one chain (default: MAX_CONTEXT_URLS).
          [strict] True to raise on values that look like keywords
            instead of ignoring them (default: False).
        """
        # set default options
        options = options.copy() if options else {}
        options.setdefault('base', None)
        options.setdefault('documentLoader', _default_document_loader)
        options.setdefault('processingMode', 'json-ld-1.1')
        options.setdefault('maxRemoteContexts', MAX_CONTEXT_URLS)
        options.setdefault('strict', False)
        if options['processingMode'] not in PROCESSING_MODES:
            raise ValueError(
                'Unknown processing mode: ' + repr(options['processingMode']))
        self.options = options

    @property
    def document_iri(self):
        return self.options['base'] or None

    @property
    def document_loader(self):
        return self.options['documentLoader']

    @property
    def max_remote_contexts(self):
        return self.options['maxRemoteContexts']

    @property
    def strict(self):
        return self.options['strict']

    def is_keyword(self, v):
        """
        Returns whether or not the given value is a keyword.

        :param v: the value to check.

        :return: True if the value is a keyword, False if not.
        """
        return isinstance(v, str) and v in KEYWORDS

    def is_processing_mode_1_0(self):
        """
        Returns True if the processor runs in json-ld-1.0 mode.
        """
        return self.options['processingMode'] == 'json-ld-1.0'

    def base(self, active_ctx):
        """
        Computes the effective base IRI of an active context: its own base
        IRI, resolved against the document IRI if relative, or the
        document IRI when the context has no base entry.

        :param active_ctx: the active context.

        :return: the base IRI, or None if there is none.
        """
        base = active_ctx.base
        if base is NULL:
            return None
        if base is None:
            return self.document_iri
        if is_absolute_iri(base):
            return base
        if self.document_iri is None:
            return None
        return resolve(base, self.document_iri)

    async def load_document(self, url, profile=None, request_profile=None):
        """
        Loads a remote document with the configured document loader.

        :param url: the absolute IRI to load.
        :param profile: the Profile the document is used as.
        :param request_profile: the Profile(s) to ask the server for.

        :return: the remote document.
        """
        remote = self.document_loader(
            url, load_document_options(profile, request_profile))
        if inspect.isawaitable(remote):
            remote = await remote
        return read_remote_document(remote, url)


async def async_process_context(
        local_ctx, options=None, active_ctx=None, override_protected=False):
    """
    Processes a local context, retrieving any URLs as necessary, and
    returns a new active context.

    :param local_ctx: the local context to process.
    :param options: the options to use, see Processor.
    :param active_ctx: the current active context (default: a new empty
      one).
    :param override_protected: True to allow protected terms to change.

    :return: the new active context.
    """
    if active_ctx is None:
        active_ctx = ActiveContext()
    return await active_ctx.join_context_value(
        Processor(options), local_ctx, override_protected=override_protected)


def process_context(
        local_ctx, options=None, active_ctx=None, override_protected=False):
    """
    Processes a local context, retrieving any URLs as necessary, and
    returns a new active context. Must not be called from a running event
    loop; use async_process_context there.

    :param local_ctx: the local context to process.
    :param options: the options to use, see Processor.
    :param active_ctx: the current active context (default: a new empty
      one).
    :param override_protected: True to allow protected terms to change.

    :return: the new active context.
    """
    return asyncio.run(async_process_context(
        local_ctx, options, active_ctx, override_protected))


def load_document(url, options=None):
    """
    Loads a remote document synchronously.

    :param url: the URL to load.
    :param options: the options to use:
      [documentLoader(url, options)] the document loader
        (default: _default_document_loader).
      [profile] the Profile requested (default: None).

    :return: the remote document.
    """
    options = options or {}
    processor = Processor(
        {'documentLoader': options.get('documentLoader',
                                       _default_document_loader)})
    return asyncio.run(processor.load_document(url, options.get('profile')))


# The default JSON-LD document loader.
try:
    _default_document_loader = requests_document_loader()
except ImportError:
    try:
        _default_document_loader = aiohttp_document_loader()
    except ImportError:
        _default_document_loader = dummy_document_loader()
