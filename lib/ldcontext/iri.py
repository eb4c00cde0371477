"""
IRI classification and reference resolution.

The classification helpers are plain string predicates. ``resolve()``
implements reference resolution as described in RFC 3986 section 5.2.
"""

import re
from collections import namedtuple
from typing import Optional, Tuple

# characters that end a prefix IRI
GEN_DELIMS = ':/?#[]@'

ParsedIri = namedtuple(
    'ParsedIri', ['scheme', 'authority', 'path', 'query', 'fragment'])

# regex from RFC 3986 appendix B
_IRI_PARTS = re.compile(
    r'^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$',
    re.DOTALL)
_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*$')
_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')
_FORBIDDEN = frozenset('<>"{}|\\^` ')


def split_prefix(value: str) -> Optional[Tuple[str, str]]:
    """
    Splits a value at its first colon.

    :param value: the value to split.

    :return: a (prefix, suffix) tuple, or None if there is no colon.
    """
    idx = value.find(':')
    if idx == -1:
        return None
    return value[:idx], value[idx + 1:]


def is_blank_node_identifier(value: str) -> bool:
    """Return True if the value is a blank node identifier ('_:' prefix)."""
    return value.startswith('_:')


def is_iri_reference(value: str) -> bool:
    """
    Returns True if the value is syntactically usable as an IRI reference:
    no whitespace, control characters, characters excluded by RFC 3987 or
    malformed percent escapes.

    :param value: the value to check.

    :return: True if the value is an IRI reference, False if not.
    """
    for ch in value:
        if ch in _FORBIDDEN or ord(ch) < 0x20 or ord(ch) == 0x7f:
            return False
    return not _BAD_ESCAPE.search(value)


def is_absolute_iri(value: str) -> bool:
    """
    Returns True if the value is an absolute IRI: a scheme followed by a
    colon, with no character an IRI cannot carry.

    :param value: the value to check.

    :return: True if the value is an absolute IRI, False if not.
    """
    parts = split_prefix(value)
    if parts is None or not _SCHEME.match(parts[0]):
        return False
    return is_iri_reference(value)


def is_compact_iri(value: str) -> bool:
    """
    Returns True if the value has the shape of a compact IRI: a non-empty
    prefix other than '_' and a suffix that does not start with '//'.

    :param value: the value to check.

    :return: True if the value may be a compact IRI, False if not.
    """
    parts = split_prefix(value)
    if parts is None:
        return False
    prefix, suffix = parts
    return prefix != '' and prefix != '_' and not suffix.startswith('//')


def ends_with_gen_delim(value: str) -> bool:
    """Return True if the last character of value is a gen-delim."""
    return value != '' and value[-1] in GEN_DELIMS


def parse_iri(value: str) -> ParsedIri:
    """
    Splits an IRI reference into its five components. Absent components
    are None, the path is always a string.
    """
    return ParsedIri(*_IRI_PARTS.match(value).groups())


def unparse_iri(parsed: ParsedIri) -> str:
    """Recompose an IRI from its components."""
    rval = ''
    if parsed.scheme is not None:
        rval += parsed.scheme + ':'
    if parsed.authority is not None:
        rval += '//' + parsed.authority
    rval += parsed.path
    if parsed.query is not None:
        rval += '?' + parsed.query
    if parsed.fragment is not None:
        rval += '#' + parsed.fragment
    return rval


def remove_dot_segments(path: str) -> str:
    """
    Removes dot segments ('.' and '..') from an IRI path,
    as described in https://www.ietf.org/rfc/rfc3986.txt (section 5.2.4).

    :param path: the IRI path to remove dot segments from.

    :return: a path with normalized dot segments.
    """
    output = []
    while path:
        if path.startswith('../'):
            path = path[3:]
        elif path.startswith('./'):
            path = path[2:]
        elif path.startswith('/./'):
            path = path[2:]
        elif path == '/.':
            path = '/'
        elif path.startswith('/../'):
            path = path[3:]
            if output:
                output.pop()
        elif path == '/..':
            path = '/'
            if output:
                output.pop()
        elif path in ('.', '..'):
            path = ''
        else:
            start = 1 if path.startswith('/') else 0
            end = path.find('/', start)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]
    return ''.join(output)


def _merge_paths(base: ParsedIri, path: str) -> str:
    if base.authority is not None and base.path == '':
        return '/' + path
    return base.path[:base.path.rfind('/') + 1] + path


def resolve(reference: str, base: Optional[str] = None) -> str:
    """
    Resolves an IRI reference against a base IRI.

    :param reference: the (possibly relative) IRI reference.
    :param base: the absolute base IRI, may be None if reference is absolute.

    :return: the resolved absolute IRI.

    :raises ValueError: if reference is malformed, or if it is relative and
        the base is missing or not absolute.
    """
    if not is_iri_reference(reference):
        raise ValueError(f"Found invalid IRI reference '{reference}'")

    ref = parse_iri(reference)
    if ref.scheme is not None and _SCHEME.match(ref.scheme):
        return unparse_iri(ref._replace(path=remove_dot_segments(ref.path)))

    if base is None:
        raise ValueError(
            f"Found invalid relative IRI '{reference}' for a missing base IRI")
    if not is_absolute_iri(base):
        raise ValueError(
            f"Found invalid base IRI '{base}' for value '{reference}'")

    parsed_base = parse_iri(base)
    if ref.authority is not None:
        authority = ref.authority
        path = remove_dot_segments(ref.path)
        query = ref.query
    else:
        authority = parsed_base.authority
        if ref.path == '':
            path = parsed_base.path
            query = ref.query if ref.query is not None else parsed_base.query
        else:
            if ref.path.startswith('/'):
                path = remove_dot_segments(ref.path)
            else:
                path = remove_dot_segments(_merge_paths(parsed_base, ref.path))
            query = ref.query

    return unparse_iri(ParsedIri(
        parsed_base.scheme, authority, path, query, ref.fragment))
