"""
The active context.

.. module:: ldcontext.context
  :synopsis: Active context value type
"""

from ldcontext.errors import ErrorCode, JsonLdError
from ldcontext.nullable import NULL, value_of
from ldcontext.syntax import is_object


class ActiveContext(object):
    """
    The term definitions and defaults that apply while processing a
    JSON-LD document.

    Instances returned by ``join_context_value`` and
    ``join_context_document`` are not modified afterwards; processing
    always works on a copy.
    """

    def __init__(self, base=None):
        """
        Creates an empty active context.

        :param base: an explicit base IRI; None leaves the base unset so
          the processor's document IRI applies.
        """
        # term -> TermDefinition or NULL
        self._definitions = {}
        # None (unset), NULL or an IRI
        self._base = base
        # None (unset), NULL or an IRI / blank node identifier
        self._vocab = None
        self._default_language = None
        self._default_base_direction = None
        self._previous_context = None

    @classmethod
    def with_base(cls, base):
        """
        Creates an empty active context with the given base IRI.

        :param base: the base IRI.

        :return: the new ActiveContext.
        """
        return cls(base=base)

    @property
    def base(self):
        """The base IRI: None if unset, NULL if explicitly null."""
        return self._base

    @property
    def vocab(self):
        """The vocabulary mapping: None if unset, NULL if explicitly null."""
        return self._vocab

    @property
    def default_language(self):
        return self._default_language

    @property
    def default_base_direction(self):
        return self._default_base_direction

    @property
    def previous_context(self):
        """The context to revert to when a non-propagated scope ends."""
        return self._previous_context

    def has_previous_context(self):
        return self._previous_context is not None

    def term_definition(self, term):
        """
        Gets the definition of a term.

        :param term: the term.

        :return: the TermDefinition, or None if the term is undefined or
          explicitly mapped to null.
        """
        return value_of(self._definitions.get(term))

    def raw_term_definition(self, term):
        """
        Gets the definition of a term, keeping explicit null mappings.

        :param term: the term.

        :return: the TermDefinition, NULL, or None if the term is absent.
        """
        return self._definitions.get(term)

    def has_protected_term_definition(self):
        """
        Returns True if any term of this context is protected.
        """
        return any(
            d is not NULL and d.is_protected
            for d in self._definitions.values())

    def terms(self):
        """Return the terms with a definition or an explicit null mapping."""
        return self._definitions.keys()

    def __contains__(self, term):
        return term in self._definitions

    def __len__(self):
        return len(self._definitions)

    def __eq__(self, other):
        if not isinstance(other, ActiveContext):
            return NotImplemented
        return (
            self._definitions == other._definitions and
            self._base == other._base and
            self._vocab == other._vocab and
            self._default_language == other._default_language and
            self._default_base_direction ==
            other._default_base_direction and
            self._previous_context == other._previous_context)

    __hash__ = None

    def __repr__(self):
        return (
            f'ActiveContext(base={self._base!r}, vocab={self._vocab!r}, '
            f'terms={sorted(self._definitions)!r})')

    async def join_context_value(
            self, processor, local_context, override_protected=False,
            propagate=True, base_url=None):
        """
        Processes a local context on top of this one.

        :param processor: the Processor holding the options to use.
        :param local_context: the local context: None, an IRI string, a
          context definition object or an array of those.
        :param override_protected: True to allow protected terms to be
          redefined or the context to be nulled.
        :param propagate: False for a non-propagated scope; the result
          links back to this context when this context is itself scoped.
        :param base_url: the IRI relative context references resolve
          against, defaults to this context's effective base IRI.

        :return: the new ActiveContext.
        """
        from ldcontext.merge import process_context
        return await process_context(
            processor, self, local_context, [], {},
            override_protected=override_protected, propagate=propagate,
            base_url=base_url)

    async def join_context_document(
            self, processor, document, override_protected=False,
            propagate=True, base_url=None):
        """
        Processes the @context entry of a JSON-LD document on top of this
        context.

        :param processor: the Processor holding the options to use.
        :param document: the JSON-LD document object.
        :param override_protected: see join_context_value.
        :param propagate: see join_context_value.
        :param base_url: see join_context_value.

        :return: the new ActiveContext; this context itself if the
          document has no @context entry.
        """
        if not is_object(document):
            raise JsonLdError(
                'Invalid JSON-LD syntax; a JSON-LD document with a context '
                'must be an object.', 'jsonld.SyntaxError',
                {'document': document}, code=ErrorCode.INVALID_LOCAL_CONTEXT)
        if '@context' not in document:
            return self
        return await self.join_context_value(
            processor, document['@context'],
            override_protected=override_protected, propagate=propagate,
            base_url=base_url)

    def _copy(self):
        """
        Returns a shallow working copy; term definitions are immutable and
        the previous context is shared read-only.
        """
        rval = ActiveContext.__new__(ActiveContext)
        rval._definitions = dict(self._definitions)
        rval._base = self._base
        rval._vocab = self._vocab
        rval._default_language = self._default_language
        rval._default_base_direction = self._default_base_direction
        rval._previous_context = self._previous_context
        return rval

    def _set_term_definition(self, term, definition):
        self._definitions[term] = definition

    def _remove_term_definition(self, term):
        return self._definitions.pop(term, None)

