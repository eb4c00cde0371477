"""
The Context Processing algorithm.

.. module:: ldcontext.merge
  :synopsis: Folding local contexts onto an active context
"""

import logging

from ldcontext import expand, termdef
from ldcontext.context import ActiveContext
from ldcontext.definition import Direction
from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.iri import (
    is_absolute_iri, is_blank_node_identifier, is_iri_reference, resolve)
from ldcontext.nullable import NULL
from ldcontext.remote import Profile
from ldcontext.syntax import (
    arrayify, is_bool, is_numeric, is_object, is_string,
    is_well_formed_language_tag)

logger = logging.getLogger(__name__)

# context definition entries that are not terms
CONTEXT_KEYWORDS = frozenset([
    '@base', '@direction', '@import', '@language', '@propagate',
    '@protected', '@version', '@vocab'])


async def process_context(
        processor, active_ctx, local_ctx, remote_contexts, remote_cache,
        override_protected=False, propagate=True, base_url=None):
    """
    Processes a local context and returns a new active context.

    :param processor: the Processor holding the options to use.
    :param active_ctx: the current active context, left unchanged.
    :param local_ctx: the local context to process.
    :param remote_contexts: the remote context IRIs dereferenced in this
      processing chain.
    :param remote_cache: loaded remote documents by IRI, shared by the
      whole processing run.
    :param override_protected: True to allow protected terms to change.
    :param propagate: False for a non-propagated scope; the result then
      links back to active_ctx if active_ctx is itself scoped, and a null
      context links back to what it replaced.
    :param base_url: the IRI context references resolve against, None for
      the effective base IRI of active_ctx.

    :return: the new active context.
    """
    result = active_ctx._copy()

    if (is_object(local_ctx) and
            is_bool(local_ctx.get('@propagate'))):
        propagate = local_ctx['@propagate']

    # chain a non-propagated scope onto an already scoped context
    if not propagate and result.has_previous_context():
        result._previous_context = active_ctx._copy()

    for ctx in arrayify(local_ctx):
        # reset to initial context
        if ctx is None:
            if (not override_protected and
                    active_ctx.has_protected_term_definition()):
                raise JsonLdError(
                    'Tried to nullify a context with protected terms '
                    'outside of a term definition.', 'jsonld.SyntaxError',
                    {}, code=ErrorCode.INVALID_CONTEXT_NULLIFICATION)
            initial = ActiveContext()
            if not propagate:
                initial._previous_context = result
            result = initial
            continue

        if is_string(ctx):
            result = await _process_remote_context(
                processor, active_ctx, result, ctx, remote_contexts,
                remote_cache, override_protected, propagate, base_url)
            continue

        # context must be an object now
        if not is_object(ctx):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context must be an object.',
                'jsonld.SyntaxError', {'context': ctx},
                code=ErrorCode.INVALID_LOCAL_CONTEXT)

        await _process_context_definition(
            processor, result, ctx, remote_contexts, remote_cache,
            override_protected, base_url)

    return result


async def _load_context(processor, url, what):
    """
    Loads a remote context document and returns the remote document.
    """
    try:
        remote = await processor.load_document(url, Profile.CONTEXT)
    except Exception as cause:
        raise JsonLdError(
            'Dereferencing a URL did not result in a valid JSON-LD '
            'context.', 'jsonld.ContextUrlError', {'url': url},
            code=ErrorCode.LOADING_REMOTE_CONTEXT_FAILED, cause=cause)
    document = remote['document']
    if not is_object(document) or '@context' not in document:
        raise JsonLdError(
            'Dereferencing a URL did not result in a JSON object. The '
            'response was valid JSON, but it was not a JSON object with '
            'an @context entry.', 'jsonld.InvalidUrl',
            {'url': url, 'for': what},
            code=ErrorCode.INVALID_REMOTE_CONTEXT)
    return remote


async def _process_remote_context(
        processor, active_ctx, result, reference, remote_contexts,
        remote_cache, override_protected, propagate, base_url):
    """
    Dereferences a context IRI and processes the context it holds.
    """
    base = base_url if base_url is not None else processor.base(active_ctx)
    try:
        url = resolve(reference, base)
    except ValueError as cause:
        raise JsonLdError(
            'Could not resolve the context reference to an absolute IRI.',
            'jsonld.ContextUrlError', {'url': reference, 'base': base},
            code=ErrorCode.LOADING_REMOTE_CONTEXT_FAILED, cause=cause)

    if len(remote_contexts) >= processor.max_remote_contexts:
        raise JsonLdError(
            'Maximum number of @context URLs exceeded.',
            'jsonld.ContextUrlError',
            {'max': processor.max_remote_contexts, 'url': url},
            code=ErrorCode.CONTEXT_OVERFLOW)
    remote_contexts.append(url)

    remote = remote_cache.get(url)
    if remote is None:
        logger.debug('Dereferencing remote context %s', url)
        remote = await _load_context(processor, url, '@context')
        remote_cache[url] = remote
    else:
        logger.debug('Using cached remote context %s', url)

    return await process_context(
        processor, result, remote['document']['@context'],
        list(remote_contexts), remote_cache,
        override_protected=override_protected,
        propagate=propagate, base_url=remote['documentUrl'])


async def _process_context_definition(
        processor, result, ctx, remote_contexts, remote_cache,
        override_protected, base_url):
    """
    Applies one context definition object to result in place.
    """
    # handle @version
    if '@version' in ctx:
        version = ctx['@version']
        if not is_numeric(version) or not 1.09 <= version <= 1.11:
            raise JsonLdError(
                'Unsupported JSON-LD version: ' + str(version),
                'jsonld.UnsupportedVersion', {'context': ctx},
                code=ErrorCode.INVALID_VERSION_VALUE)
        if processor.is_processing_mode_1_0():
            raise JsonLdError(
                '@version: ' + str(version) + ' not compatible with '
                'json-ld-1.0', 'jsonld.ProcessingModeConflict',
                {'context': ctx}, code=ErrorCode.PROCESSING_MODE_CONFLICT)

    # handle @import
    if '@import' in ctx:
        ctx = await _import_context(processor, result, ctx, base_url)

    # handle @base, only outside of remote contexts
    if '@base' in ctx and not remote_contexts:
        base = ctx['@base']
        if base is None:
            result._base = NULL
        elif not is_string(base):
            raise JsonLdError(
                'Invalid JSON-LD syntax; the value of "@base" in a '
                '@context must be a string or null.',
                'jsonld.SyntaxError', {'context': ctx},
                code=ErrorCode.INVALID_BASE_IRI)
        elif is_absolute_iri(base):
            result._base = base
        else:
            parent = processor.base(result)
            if parent is None or not is_iri_reference(base):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@base" in a '
                    '@context must be an absolute IRI or resolve against '
                    'one.', 'jsonld.SyntaxError',
                    {'context': ctx, 'base': parent},
                    code=ErrorCode.INVALID_BASE_IRI)
            result._base = resolve(base, parent)

    # handle @vocab
    if '@vocab' in ctx:
        vocab = ctx['@vocab']
        if vocab is None:
            result._vocab = NULL
        elif is_string(vocab) and (
                is_blank_node_identifier(vocab) or is_iri_reference(vocab)):
            expanded = await expand.expand_iri(
                processor, result, vocab, vocab=True, document_relative=True)
            if expanded is None:
                raise JsonLdError(
                    'Invalid JSON-LD syntax; the value of "@vocab" in a '
                    '@context must expand to an IRI.', 'jsonld.SyntaxError',
                    {'context': ctx}, code=ErrorCode.INVALID_VOCAB_MAPPING)
            result._vocab = expanded
        else:
            raise JsonLdError(
                'Invalid JSON-LD syntax; the value of "@vocab" in a '
                '@context must be a string or null.', 'jsonld.SyntaxError',
                {'context': ctx}, code=ErrorCode.INVALID_VOCAB_MAPPING)

    # handle @language
    if '@language' in ctx:
        language = ctx['@language']
        if language is None:
            result._default_language = None
        elif is_string(language):
            if not is_well_formed_language_tag(language):
                logger.warning(
                    'Default language %r is not well-formed.', language)
            result._default_language = language
        else:
            raise JsonLdError(
                'Invalid JSON-LD syntax; the value of "@language" in a '
                '@context must be a string or null.', 'jsonld.SyntaxError',
                {'context': ctx}, code=ErrorCode.INVALID_DEFAULT_LANGUAGE)

    # handle @direction
    if '@direction' in ctx:
        _require_1_1(processor, ctx, '@direction')
        try:
            direction = Direction.from_json(ctx['@direction'])
        except ValueError as cause:
            raise JsonLdError(
                'Invalid JSON-LD syntax; the value of "@direction" in a '
                '@context must be null, "ltr", or "rtl".',
                'jsonld.SyntaxError', {'context': ctx},
                code=ErrorCode.INVALID_BASE_DIRECTION, cause=cause)
        result._default_base_direction = (
            None if direction is NULL else direction)

    # handle @propagate, already applied by process_context
    if '@propagate' in ctx:
        _require_1_1(processor, ctx, '@propagate')
        if not is_bool(ctx['@propagate']):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @propagate value must be a '
                'boolean.', 'jsonld.SyntaxError', {'context': ctx},
                code=ErrorCode.INVALID_PROPAGATE_VALUE)

    # handle @protected
    protected = False
    if '@protected' in ctx:
        _require_1_1(processor, ctx, '@protected')
        protected = ctx['@protected']
        if not is_bool(protected):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @protected value must be a '
                'boolean.', 'jsonld.SyntaxError', {'context': ctx},
                code=ErrorCode.INVALID_PROTECTED_VALUE)

    # define context mappings for keys in local context
    defined = {}
    scope = termdef.DefinitionScope(
        remote_contexts=remote_contexts, remote_cache=remote_cache,
        base_url=base_url, override_protected=override_protected,
        protected=protected)
    for term in ctx:
        if term in CONTEXT_KEYWORDS:
            continue
        await termdef.create_term_definition(
            processor, result, ctx, term, defined, scope)


async def _import_context(processor, result, ctx, base_url):
    """
    Merges the context definition named by @import into ctx.

    :return: the merged context definition; entries of ctx win.
    """
    _require_1_1(processor, ctx, '@import')
    value = ctx['@import']
    if not is_string(value):
        raise JsonLdError(
            'Invalid JSON-LD syntax; @import must be a string.',
            'jsonld.SyntaxError', {'context': ctx},
            code=ErrorCode.INVALID_IMPORT_VALUE)

    base = base_url if base_url is not None else processor.base(result)
    try:
        url = resolve(value, base)
    except ValueError as cause:
        raise JsonLdError(
            'Could not resolve @import to an absolute IRI.',
            'jsonld.ContextUrlError', {'url': value, 'base': base},
            code=ErrorCode.LOADING_REMOTE_CONTEXT_FAILED, cause=cause)

    logger.debug('Importing context %s', url)
    remote = await _load_context(processor, url, '@import')
    imported = remote['document']['@context']
    if not is_object(imported):
        raise JsonLdError(
            'Invalid JSON-LD syntax; @import must reference a single '
            'context object.', 'jsonld.SyntaxError',
            {'context': ctx, 'url': url},
            code=ErrorCode.INVALID_REMOTE_CONTEXT)
    if '@import' in imported:
        raise JsonLdError(
            'Invalid JSON-LD syntax; an imported context must not include '
            'an @import entry.', 'jsonld.SyntaxError',
            {'context': ctx, 'url': url},
            code=ErrorCode.INVALID_CONTEXT_ENTRY)

    merged = dict(imported)
    merged.update(ctx)
    return merged


def _require_1_1(processor, ctx, keyword):
    if processor.is_processing_mode_1_0():
        raise JsonLdError(
            'Invalid JSON-LD syntax; ' + keyword + ' requires JSON-LD 1.1.',
            'jsonld.SyntaxError', {'context': ctx},
            code=ErrorCode.INVALID_CONTEXT_ENTRY)
