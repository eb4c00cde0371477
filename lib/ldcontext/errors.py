"""
JSON-LD error taxonomy.

.. module:: ldcontext.errors
  :synopsis: Errors raised by JSON-LD context processing
"""

import sys
import traceback
from enum import Enum


class ErrorCode(str, Enum):
    """
    The closed set of JSON-LD error codes.

    Members compare equal to their W3C error string, so
    ``error.code == 'cyclic IRI mapping'`` holds.
    """

    COLLIDING_KEYWORDS = 'colliding keywords'
    CONFLICTING_INDEXES = 'conflicting indexes'
    CONTEXT_OVERFLOW = 'context overflow'
    CYCLIC_IRI_MAPPING = 'cyclic IRI mapping'
    INVALID_ID_VALUE = 'invalid @id value'
    INVALID_IMPORT_VALUE = 'invalid @import value'
    INVALID_INCLUDED_VALUE = 'invalid @included value'
    INVALID_INDEX_VALUE = 'invalid @index value'
    INVALID_NEST_VALUE = 'invalid @nest value'
    INVALID_PREFIX_VALUE = 'invalid @prefix value'
    INVALID_PROPAGATE_VALUE = 'invalid @propagate value'
    INVALID_PROTECTED_VALUE = 'invalid @protected value'
    INVALID_REVERSE_VALUE = 'invalid @reverse value'
    INVALID_VERSION_VALUE = 'invalid @version value'
    INVALID_BASE_DIRECTION = 'invalid base direction'
    INVALID_BASE_IRI = 'invalid base IRI'
    INVALID_CONTAINER_MAPPING = 'invalid container mapping'
    INVALID_CONTEXT_ENTRY = 'invalid context entry'
    INVALID_CONTEXT_NULLIFICATION = 'invalid context nullification'
    INVALID_DEFAULT_LANGUAGE = 'invalid default language'
    INVALID_IRI_MAPPING = 'invalid IRI mapping'
    INVALID_JSON_LITERAL = 'invalid JSON literal'
    INVALID_KEYWORD_ALIAS = 'invalid keyword alias'
    INVALID_LANGUAGE_MAP_VALUE = 'invalid language map value'
    INVALID_LANGUAGE_MAPPING = 'invalid language mapping'
    INVALID_LANGUAGE_TAGGED_STRING = 'invalid language-tagged string'
    INVALID_LANGUAGE_TAGGED_VALUE = 'invalid language-tagged value'
    INVALID_LOCAL_CONTEXT = 'invalid local context'
    INVALID_REMOTE_CONTEXT = 'invalid remote context'
    INVALID_REVERSE_PROPERTY = 'invalid reverse property'
    INVALID_REVERSE_PROPERTY_MAP = 'invalid reverse property map'
    INVALID_REVERSE_PROPERTY_VALUE = 'invalid reverse property value'
    INVALID_SCOPED_CONTEXT = 'invalid scoped context'
    INVALID_SCRIPT_ELEMENT = 'invalid script element'
    INVALID_SET_OR_LIST_OBJECT = 'invalid set or list object'
    INVALID_TERM_DEFINITION = 'invalid term definition'
    INVALID_TYPE_MAPPING = 'invalid type mapping'
    INVALID_TYPE_VALUE = 'invalid type value'
    INVALID_TYPED_VALUE = 'invalid typed value'
    INVALID_VALUE_OBJECT = 'invalid value object'
    INVALID_VALUE_OBJECT_VALUE = 'invalid value object value'
    INVALID_VOCAB_MAPPING = 'invalid vocab mapping'
    IRI_CONFUSED_WITH_PREFIX = 'IRI confused with prefix'
    KEYWORD_REDEFINITION = 'keyword redefinition'
    LOADING_DOCUMENT_FAILED = 'loading document failed'
    LOADING_REMOTE_CONTEXT_FAILED = 'loading remote context failed'
    MULTIPLE_CONTEXT_LINK_HEADERS = 'multiple context link headers'
    PROCESSING_MODE_CONFLICT = 'processing mode conflict'
    PROTECTED_TERM_REDEFINITION = 'protected term redefinition'
    UNCATEGORIZED = 'uncategorized error'

    def __str__(self):
        return self.value


class JsonLdError(Exception):
    """
    Base class for JSON-LD errors.

    Only ``code`` identifies the error; ``details`` carries diagnostic
    values such as the offending term or local context.
    """

    def __init__(self, message, type_, details=None, code=None, cause=None):
        Exception.__init__(self, message)
        self.type = type_
        self.details = details
        self.code = ErrorCode(code) if code is not None else None
        self.cause = cause
        self.causeTrace = traceback.extract_tb(*sys.exc_info()[2:])

    def __str__(self):
        rval = str(self.args)
        rval += '\nType: ' + self.type
        if self.code:
            rval += '\nCode: ' + self.code.value
        if self.details:
            rval += '\nDetails: ' + repr(self.details)
        if self.cause:
            rval += '\nCause: ' + str(self.cause)
            rval += ''.join(traceback.format_list(self.causeTrace))
        return rval
