"""
IRI expansion against an active context.

.. module:: ldcontext.expand
  :synopsis: IRI expansion
"""

import logging

from ldcontext import termdef
from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.iri import is_absolute_iri, resolve, split_prefix
from ldcontext.nullable import NULL
from ldcontext.syntax import has_form_of_keyword

logger = logging.getLogger(__name__)


async def expand_iri(
        processor, active_ctx, value, vocab=False, document_relative=False,
        local_ctx=None, defined=None, scope=None):
    """
    Expands a string value to a full IRI. The string may be a term, a
    prefix, a relative IRI, or an absolute IRI. The associated absolute
    IRI will be returned.

    :param processor: the Processor holding the options to use.
    :param active_ctx: the active context to use.
    :param value: the string value to expand.
    :param vocab: True to concatenate after @vocab, False not to.
    :param document_relative: True to resolve against the base IRI,
      False not to.
    :param local_ctx: the local context being processed (only given if
      called during context processing).
    :param defined: a map for tracking cycles in context definitions (only
      given if called during context processing).
    :param scope: the DefinitionScope of the context definition being
      processed (only given if called during context processing).

    :return: the expanded value, or None if it expands to nothing.
    """
    # already expanded
    if processor.is_keyword(value):
        return value

    if has_form_of_keyword(value):
        logger.warning(
            'Values beginning with "@" are reserved for future use; '
            'ignoring %r.', value)
        return None

    # define dependency not if defined
    if (local_ctx is not None and value in local_ctx and
            defined.get(value) is not True):
        await termdef.create_term_definition(
            processor, active_ctx, local_ctx, value, defined, scope)

    definition = active_ctx.raw_term_definition(value)

    # term aliases a keyword
    if (definition is not None and definition is not NULL and
            processor.is_keyword(definition.iri)):
        return definition.iri

    if vocab:
        # explicitly decoupled from @vocab
        if definition is NULL:
            return None
        if definition is not None:
            return definition.iri

    parts = split_prefix(value)
    if parts is not None and parts[0] != '':
        prefix, suffix = parts

        # blank node or IRI with an authority, not a compact IRI
        if prefix == '_' or suffix.startswith('//'):
            return value

        if (local_ctx is not None and prefix in local_ctx and
                defined.get(prefix) is not True):
            await termdef.create_term_definition(
                processor, active_ctx, local_ctx, prefix, defined, scope)

        prefix_definition = active_ctx.term_definition(prefix)
        if prefix_definition is not None and prefix_definition.is_prefix:
            return prefix_definition.iri + suffix

        if is_absolute_iri(value):
            return value

    if vocab:
        vocab_mapping = active_ctx.vocab
        if vocab_mapping is not None and vocab_mapping is not NULL:
            return vocab_mapping + value

    if document_relative:
        base = processor.base(active_ctx)
        if base is None:
            raise JsonLdError(
                'Cannot resolve a relative IRI reference; the base IRI is '
                'null.', 'jsonld.SyntaxError', {'value': value},
                code=ErrorCode.UNCATEGORIZED)
        try:
            return resolve(value, base)
        except ValueError as cause:
            raise JsonLdError(
                'Invalid JSON-LD syntax; the value is not a valid IRI '
                'reference.', 'jsonld.SyntaxError',
                {'value': value, 'base': base},
                code=ErrorCode.UNCATEGORIZED, cause=cause)

    return value
