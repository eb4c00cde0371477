"""
JSON-LD keywords and JSON value predicates.

.. module:: ldcontext.syntax
  :synopsis: Keyword recognition and value type checks
"""

import re
from numbers import Integral, Real

# JSON-LD keywords
KEYWORDS = frozenset([
    '@base',
    '@container',
    '@context',
    '@direction',
    '@graph',
    '@id',
    '@import',
    '@included',
    '@index',
    '@json',
    '@language',
    '@list',
    '@nest',
    '@none',
    '@prefix',
    '@propagate',
    '@protected',
    '@reverse',
    '@set',
    '@type',
    '@value',
    '@version',
    '@vocab'])

# well-formed BCP47 language tag (RFC 5646 simplified)
_LANGUAGE_TAG = re.compile(r'^[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*$')


def is_keyword(v):
    """
    Returns whether or not the given value is a keyword.

    :param v: the value to check.

    :return: True if the value is a keyword, False if not.
    """
    if not is_string(v):
        return False
    return v in KEYWORDS


def has_form_of_keyword(v):
    """
    Returns True if the given value looks like a keyword: an '@' followed
    by one or more ASCII letters.

    :param v: the value to check.

    :return: True if the value has the form of a keyword, False if not.
    """
    return (
        is_string(v) and len(v) > 1 and v[0] == '@' and
        v[1:].isascii() and v[1:].isalpha())


def is_well_formed_language_tag(v):
    """
    Returns True if the given string is a well-formed BCP47 language tag.

    :param v: the value to check.

    :return: True if the value is well-formed, False if not.
    """
    return bool(_LANGUAGE_TAG.match(v))


def is_object(v):
    """
    Returns True if the given value is an Object.

    :param v: the value to check.

    :return: True if the value is an Object, False if not.
    """
    return isinstance(v, dict)


def is_array(v):
    """
    Returns True if the given value is an Array.

    :param v: the value to check.

    :return: True if the value is an Array, False if not.
    """
    return isinstance(v, list)


def is_string(v):
    """
    Returns True if the given value is a String.

    :param v: the value to check.

    :return: True if the value is a String, False if not.
    """
    return isinstance(v, str)


def is_bool(v):
    """
    Returns True if the given value is a Boolean.

    :param v: the value to check.

    :return: True if the value is a Boolean, False if not.
    """
    return isinstance(v, bool)


def is_numeric(v):
    """
    Returns True if the given value is a JSON number. Booleans are not
    numbers even though Python treats them as integers.

    :param v: the value to check.

    :return: True if the value is numeric, False if not.
    """
    return isinstance(v, (Integral, Real)) and not isinstance(v, bool)


def arrayify(value):
    """
    If value is an array, returns value, otherwise returns an array
    containing value as the only element.

    :param value: the value.

    :return: an array.
    """
    return value if is_array(value) else [value]
