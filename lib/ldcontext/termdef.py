"""
The Create Term Definition algorithm.

.. module:: ldcontext.termdef
  :synopsis: Term definition creation during context processing
"""

import logging

from ldcontext import expand, merge
from ldcontext.definition import (
    Container, ContainerItem, Direction, TermDefinitionBuilder)
from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.iri import (
    ends_with_gen_delim, is_absolute_iri, is_blank_node_identifier,
    is_compact_iri, split_prefix)
from ldcontext.nullable import NULL
from ldcontext.syntax import (
    has_form_of_keyword, is_bool, is_object, is_string,
    is_well_formed_language_tag)

logger = logging.getLogger(__name__)

# entries allowed in an expanded term definition
VALID_TERM_KEYS = frozenset([
    '@container', '@context', '@direction', '@id', '@index', '@language',
    '@nest', '@prefix', '@protected', '@reverse', '@type'])
VALID_TERM_KEYS_1_0 = frozenset([
    '@container', '@id', '@language', '@reverse', '@type'])


class DefinitionScope(object):
    """
    Parameters shared by every term of one context definition.

    :param remote_contexts: the remote context IRIs dereferenced so far.
    :param remote_cache: the per-run cache of loaded remote documents.
    :param base_url: the IRI scoped context references resolve against.
    :param override_protected: True if protected terms may be redefined.
    :param protected: the default protected flag of new definitions.
    """

    def __init__(
            self, remote_contexts=None, remote_cache=None, base_url=None,
            override_protected=False, protected=False):
        self.remote_contexts = (
            remote_contexts if remote_contexts is not None else [])
        self.remote_cache = remote_cache if remote_cache is not None else {}
        self.base_url = base_url
        self.override_protected = override_protected
        self.protected = protected


def _ignore_keyword_form(processor, value, local_ctx, term):
    """
    Handles a term or IRI value that looks like a keyword but is not one.
    """
    if processor.strict:
        raise JsonLdError(
            'Invalid JSON-LD syntax; values beginning with "@" are '
            'reserved for future use.', 'jsonld.SyntaxError',
            {'context': local_ctx, 'term': term, 'value': value},
            code=ErrorCode.UNCATEGORIZED)
    logger.warning(
        'Values beginning with "@" are reserved for future use; '
        'ignoring term %r with value %r.', term, value)


def _read_container(value, local_ctx, term):
    try:
        return Container.from_json(value)
    except ValueError as cause:
        raise JsonLdError(
            'Invalid JSON-LD syntax; @context @container value must be '
            'a container keyword or an array of them.',
            'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_CONTAINER_MAPPING, cause=cause)


async def create_term_definition(
        processor, active_ctx, local_ctx, term, defined, scope=None):
    """
    Creates a term definition during context processing.

    :param processor: the Processor holding the options to use.
    :param active_ctx: the active context being built; it receives the
      new definition.
    :param local_ctx: the local context being processed.
    :param term: the key in the local context to define the mapping for.
    :param defined: a map of defining/defined keys to detect cycles
      and prevent double definitions.
    :param scope: the DefinitionScope of the local context.
    """
    if scope is None:
        scope = DefinitionScope()

    if term in defined:
        # term already defined
        if defined[term]:
            return
        # cycle detected
        raise JsonLdError(
            'Cyclical context definition detected.',
            'jsonld.CyclicalContext', {
                'context': local_ctx,
                'term': term
            }, code=ErrorCode.CYCLIC_IRI_MAPPING)

    if term == '':
        raise JsonLdError(
            'Invalid JSON-LD syntax; a term cannot be an empty string.',
            'jsonld.SyntaxError', {'context': local_ctx},
            code=ErrorCode.INVALID_TERM_DEFINITION)

    # now defining term
    defined[term] = False

    # get context term value
    value = local_ctx[term]

    if term == '@type' and _is_type_container_only(processor, value):
        # @type may only be given a @set container
        pass
    elif processor.is_keyword(term):
        raise JsonLdError(
            'Invalid JSON-LD syntax; keywords cannot be overridden.',
            'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
            code=ErrorCode.KEYWORD_REDEFINITION)
    elif has_form_of_keyword(term):
        _ignore_keyword_form(processor, term, local_ctx, term)
        defined[term] = True
        return

    # remove old mapping, an explicit null does not count as previous
    removed = active_ctx._remove_term_definition(term)
    previous = None if removed is NULL else removed

    # convert short-hand value to object w/@id
    simple_term = False
    if value is None:
        value = {'@id': None}
    elif is_string(value):
        simple_term = True
        value = {'@id': value}
    elif not is_object(value):
        raise JsonLdError(
            'Invalid JSON-LD syntax; @context property values must be '
            'strings or objects.', 'jsonld.SyntaxError',
            {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_TERM_DEFINITION)

    # make sure term definition only has expected keywords
    if processor.is_processing_mode_1_0():
        valid_keys = VALID_TERM_KEYS_1_0
    else:
        valid_keys = VALID_TERM_KEYS
    for kw in value:
        if kw not in valid_keys:
            raise JsonLdError(
                'Invalid JSON-LD syntax; a term definition must not '
                'contain ' + kw, 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TERM_DEFINITION)

    definition = TermDefinitionBuilder()
    definition.reverse = False

    if '@protected' in value:
        if not is_bool(value['@protected']):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @protected must be a boolean.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_PROTECTED_VALUE)
        definition.protected = value['@protected']
    elif scope.protected:
        definition.protected = True

    if '@type' in value:
        type_ = value['@type']
        if not is_string(type_):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @type value must be '
                'a string.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TYPE_MAPPING)
        type_ = await expand.expand_iri(
            processor, active_ctx, type_, vocab=True,
            local_ctx=local_ctx, defined=defined, scope=scope)
        if type_ is None:
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @type value does not '
                'expand to an IRI.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TYPE_MAPPING)
        if (type_ in ('@json', '@none') and
                processor.is_processing_mode_1_0()):
            raise JsonLdError(
                'Invalid JSON-LD syntax; an @context @type value of ' +
                type_ + ' requires JSON-LD 1.1.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TYPE_MAPPING)
        if (type_ not in ('@id', '@vocab', '@json', '@none') and
                not is_absolute_iri(type_)):
            raise JsonLdError(
                'Invalid JSON-LD syntax; an @context @type value must '
                'be an absolute IRI.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TYPE_MAPPING)
        definition.type = type_

    if '@reverse' in value:
        await _define_reverse(
            processor, active_ctx, local_ctx, term, defined, scope, value,
            definition, removed)
        return

    explicit_null = False
    if '@id' in value and value['@id'] != term:
        id_ = value['@id']
        if id_ is None:
            # reserved, never used for IRI expansion
            explicit_null = True
        elif not is_string(id_):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @id value must be a '
                'string.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_IRI_MAPPING)
        elif not processor.is_keyword(id_) and has_form_of_keyword(id_):
            _ignore_keyword_form(processor, id_, local_ctx, term)
            _keep_previous(
                active_ctx, term, removed, scope, local_ctx, defined)
            return
        else:
            iri = await expand.expand_iri(
                processor, active_ctx, id_, vocab=True,
                local_ctx=local_ctx, defined=defined, scope=scope)
            if iri is None or not (
                    processor.is_keyword(iri) or is_absolute_iri(iri) or
                    is_blank_node_identifier(iri)):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; @context @id value must be '
                    'an absolute IRI, a blank node identifier, or a '
                    'keyword.', 'jsonld.SyntaxError',
                    {'context': local_ctx, 'term': term, 'iri': iri},
                    code=ErrorCode.INVALID_IRI_MAPPING)
            if iri == '@context':
                raise JsonLdError(
                    'Invalid JSON-LD syntax; @context cannot be aliased.',
                    'jsonld.SyntaxError',
                    {'context': local_ctx, 'term': term},
                    code=ErrorCode.INVALID_KEYWORD_ALIAS)

            # a term that looks like an IRI must expand to its own @id
            if ':' in term[1:-1] or '/' in term:
                defined[term] = True
                term_iri = await expand.expand_iri(
                    processor, active_ctx, term, vocab=True,
                    local_ctx=local_ctx, defined=defined, scope=scope)
                if term_iri != iri:
                    raise JsonLdError(
                        'Invalid JSON-LD syntax; term in form of IRI must '
                        'expand to definition.', 'jsonld.SyntaxError',
                        {'context': local_ctx, 'term': term, 'iri': iri},
                        code=ErrorCode.INVALID_IRI_MAPPING)

            definition.iri = iri
            if (':' not in term and '/' not in term and
                    (simple_term or processor.is_processing_mode_1_0()) and
                    (ends_with_gen_delim(iri) or
                     is_blank_node_identifier(iri))):
                definition.prefix = True
    else:
        definition.iri = await _derive_iri(
            processor, active_ctx, local_ctx, term, defined, scope)

    if '@container' in value:
        container = _read_container(value['@container'], local_ctx, term)
        if processor.is_processing_mode_1_0() and (
                container.array or ContainerItem.GRAPH in container or
                ContainerItem.ID in container or
                ContainerItem.TYPE in container):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @container value must be '
                '@list, @set, @index or @language in JSON-LD 1.0.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_CONTAINER_MAPPING)
        if not container.is_valid():
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @container value '
                'combines ' + ', '.join(container.keywords()) + '.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_CONTAINER_MAPPING)
        if ContainerItem.TYPE in container:
            # type mapping defaults to @id for a @type container
            if definition.type is None:
                definition.type = '@id'
            elif definition.type not in ('@id', '@vocab'):
                raise JsonLdError(
                    'Invalid JSON-LD syntax; container: @type requires '
                    '@type to be @id or @vocab.', 'jsonld.SyntaxError',
                    {'context': local_ctx, 'term': term},
                    code=ErrorCode.INVALID_TYPE_MAPPING)
        definition.container = container

    if '@index' in value:
        if (definition.container is None or
                ContainerItem.INDEX not in definition.container):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @index without @index in '
                '@container.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TERM_DEFINITION)
        if not is_string(value['@index']):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @index must be a string.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TERM_DEFINITION)
        definition.index = value['@index']

    if '@context' in value:
        try:
            definition.context = await merge.process_context(
                processor, active_ctx, value['@context'],
                list(scope.remote_contexts), scope.remote_cache,
                override_protected=True, base_url=scope.base_url)
        except JsonLdError as cause:
            raise JsonLdError(
                'Invalid JSON-LD syntax; invalid scoped context.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_SCOPED_CONTEXT, cause=cause)

    if '@language' in value and '@type' not in value:
        language = value['@language']
        if language is None:
            definition.language = NULL
        elif is_string(language):
            if not is_well_formed_language_tag(language):
                logger.warning(
                    'Language tag %r of term %r is not well-formed.',
                    language, term)
            definition.language = language
        else:
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @language value must be '
                'a string or null.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_LANGUAGE_MAPPING)

    if '@direction' in value and '@type' not in value:
        try:
            definition.direction = Direction.from_json(value['@direction'])
        except ValueError as cause:
            raise JsonLdError(
                'Invalid JSON-LD syntax; @direction value must be null, '
                '"ltr", or "rtl".', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_BASE_DIRECTION, cause=cause)

    if '@nest' in value:
        nest = value['@nest']
        if not is_string(nest) or (
                nest != '@nest' and processor.is_keyword(nest)):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @nest value must be '
                'a string which is not a keyword other than @nest.',
                'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_NEST_VALUE)
        definition.nest = nest

    if '@prefix' in value:
        if ':' in term or '/' in term:
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @prefix used on a compact '
                'IRI term.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TERM_DEFINITION)
        prefix = value['@prefix']
        if not is_bool(prefix):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context value for @prefix must be '
                'boolean.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_PREFIX_VALUE)
        if (prefix and definition.iri is not None and
                processor.is_keyword(definition.iri)):
            raise JsonLdError(
                'Invalid JSON-LD syntax; keywords may not be used as '
                'prefixes.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_TERM_DEFINITION)
        definition.prefix = prefix

    if explicit_null:
        _check_protected(previous, None, scope, local_ctx, term)
        active_ctx._set_term_definition(term, NULL)
        defined[term] = True
        return

    _commit(active_ctx, term, definition.build(), previous, scope,
            local_ctx, defined)


def _is_type_container_only(processor, value):
    """
    Returns True if value is the only allowed redefinition of @type: a
    @set container, optionally protected.
    """
    return (
        not processor.is_processing_mode_1_0() and is_object(value) and
        value.get('@container') == '@set' and
        all(k in ('@container', '@protected') for k in value))


async def _derive_iri(processor, active_ctx, local_ctx, term, defined, scope):
    """
    Computes the IRI mapping of a term that has no @id of its own.
    """
    parts = split_prefix(term)
    if parts is not None and parts[0] != '':
        prefix, suffix = parts
        if is_compact_iri(term):
            if prefix in local_ctx:
                # define dependency not if defined
                await create_term_definition(
                    processor, active_ctx, local_ctx, prefix, defined, scope)
            prefix_definition = active_ctx.term_definition(prefix)
            if prefix_definition is not None:
                return prefix_definition.iri + suffix
        # an absolute IRI or a blank node identifier
        return term

    if '/' in term:
        # a relative IRI reference
        try:
            iri = await expand.expand_iri(
                processor, active_ctx, term, vocab=True,
                document_relative=True)
        except JsonLdError as cause:
            raise JsonLdError(
                'Invalid JSON-LD syntax; a term containing "/" must expand '
                'to an absolute IRI.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_IRI_MAPPING, cause=cause)
        if iri is None or not is_absolute_iri(iri):
            raise JsonLdError(
                'Invalid JSON-LD syntax; a term containing "/" must expand '
                'to an absolute IRI.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_IRI_MAPPING)
        return iri

    if term == '@type':
        return '@type'

    vocab = active_ctx.vocab
    if vocab is None or vocab is NULL:
        raise JsonLdError(
            'Invalid JSON-LD syntax; @context terms must define an @id.',
            'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_IRI_MAPPING)
    return vocab + term


async def _define_reverse(
        processor, active_ctx, local_ctx, term, defined, scope, value,
        definition, removed):
    """
    Completes a reverse property definition.
    """
    previous = None if removed is NULL else removed
    if '@id' in value:
        raise JsonLdError(
            'Invalid JSON-LD syntax; an @reverse term definition must '
            'not contain @id.', 'jsonld.SyntaxError',
            {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_REVERSE_PROPERTY)
    if '@nest' in value:
        raise JsonLdError(
            'Invalid JSON-LD syntax; an @reverse term definition must '
            'not contain @nest.', 'jsonld.SyntaxError',
            {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_REVERSE_PROPERTY)
    reverse = value['@reverse']
    if not is_string(reverse):
        raise JsonLdError(
            'Invalid JSON-LD syntax; @context @reverse value must be '
            'a string.', 'jsonld.SyntaxError',
            {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_IRI_MAPPING)
    if has_form_of_keyword(reverse):
        _ignore_keyword_form(processor, reverse, local_ctx, term)
        _keep_previous(active_ctx, term, removed, scope, local_ctx, defined)
        return

    # expand and add @id mapping
    iri = await expand.expand_iri(
        processor, active_ctx, reverse, vocab=True,
        local_ctx=local_ctx, defined=defined, scope=scope)
    if iri is None or not (
            is_absolute_iri(iri) or is_blank_node_identifier(iri)):
        raise JsonLdError(
            'Invalid JSON-LD syntax; @context @reverse value must be '
            'an absolute IRI or a blank node identifier.',
            'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
            code=ErrorCode.INVALID_IRI_MAPPING)
    definition.iri = iri

    if '@container' in value and value['@container'] is not None:
        container = _read_container(value['@container'], local_ctx, term)
        if len(container) > 1 or (
                len(container) == 1 and
                ContainerItem.SET not in container and
                ContainerItem.INDEX not in container):
            raise JsonLdError(
                'Invalid JSON-LD syntax; @context @reverse container must '
                'be @set, @index or null.', 'jsonld.SyntaxError',
                {'context': local_ctx, 'term': term},
                code=ErrorCode.INVALID_REVERSE_PROPERTY)
        definition.container = container

    definition.reverse = True
    _commit(active_ctx, term, definition.build(), previous, scope,
            local_ctx, defined)


def _check_protected(previous, new, scope, local_ctx, term):
    """
    Raises if a protected definition would change.

    :return: the definition to keep.
    """
    if (previous is None or not previous.is_protected or
            scope.override_protected):
        return new
    if new is None or not new.same_other_than_protected(previous):
        raise JsonLdError(
            'Invalid JSON-LD syntax; tried to redefine a protected term.',
            'jsonld.SyntaxError', {'context': local_ctx, 'term': term},
            code=ErrorCode.PROTECTED_TERM_REDEFINITION)
    return previous


def _commit(active_ctx, term, new, previous, scope, local_ctx, defined):
    active_ctx._set_term_definition(
        term, _check_protected(previous, new, scope, local_ctx, term))
    defined[term] = True


def _keep_previous(active_ctx, term, removed, scope, local_ctx, defined):
    """
    Puts back the definition removed for a term whose new definition was
    skipped. A protected term may not be dropped this way.
    """
    previous = None if removed is NULL else removed
    _check_protected(previous, None, scope, local_ctx, term)
    if removed is not None:
        active_ctx._set_term_definition(term, removed)
    defined[term] = True
