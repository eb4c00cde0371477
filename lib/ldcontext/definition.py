"""
Term definitions and the container and direction values they carry.

.. module:: ldcontext.definition
  :synopsis: Term definition value types
"""

from collections import namedtuple
from enum import Enum, Flag

from ldcontext.nullable import NULL
from ldcontext.syntax import is_array, is_string


class ContainerItem(Flag):
    """
    A single @container keyword. Members combine into a bitset.
    """

    GRAPH = 1
    ID = 2
    INDEX = 4
    LANGUAGE = 8
    LIST = 16
    SET = 32
    TYPE = 64

    @classmethod
    def from_keyword(cls, keyword):
        """
        Gets the item for a container keyword.

        :param keyword: the keyword, e.g. '@set'.

        :return: the ContainerItem.

        :raises ValueError: if the keyword is not a container keyword.
        """
        try:
            return _ITEMS_BY_KEYWORD[keyword]
        except (KeyError, TypeError):
            raise ValueError(f'{keyword!r} is not a container keyword')

    @property
    def keyword(self):
        return '@' + self.name.lower()


_ITEMS_BY_KEYWORD = {item.keyword: item for item in ContainerItem}

# items that may accompany @set
_SET_COMPANIONS = (
    ContainerItem.INDEX | ContainerItem.ID |
    ContainerItem.TYPE | ContainerItem.LANGUAGE)


class Container(object):
    """
    A container mapping: a set of ContainerItems plus whether it was
    written in array form.
    """

    __slots__ = ('items', 'array')

    def __init__(self, items=ContainerItem(0), array=False):
        self.items = items
        self.array = array

    @classmethod
    def from_json(cls, value):
        """
        Reads a container mapping from its JSON form: a keyword string or
        an array of keyword strings.

        :param value: the JSON value of @container.

        :return: the Container.

        :raises ValueError: if the value is not a string or an array of
            distinct container keywords.
        """
        if is_string(value):
            return cls(ContainerItem.from_keyword(value))
        if not is_array(value):
            raise ValueError(f'{value!r} is not a container mapping')
        items = ContainerItem(0)
        for entry in value:
            item = ContainerItem.from_keyword(entry)
            if item & items:
                raise ValueError(f'duplicate container keyword {entry!r}')
            items |= item
        return cls(items, array=True)

    def is_valid(self):
        """
        Checks the combination of items against the container grammar.

        A single item is always allowed, an empty array never. @graph
        needs exactly one of @id or @index and may add @set. @set may be
        combined with any of @index, @id, @type and @language. Nothing
        else combines.

        :return: True if the combination is allowed, False if not.
        """
        if len(self) == 1:
            return True
        items = self.items
        if not items:
            return False
        if ContainerItem.GRAPH in items:
            rest = items & ~(ContainerItem.GRAPH | ContainerItem.SET)
            return rest in (ContainerItem.ID, ContainerItem.INDEX)
        if ContainerItem.SET in items:
            return not (items & ~(ContainerItem.SET | _SET_COMPANIONS))
        return False

    def keywords(self):
        """Return the container keywords in a stable order."""
        return [item.keyword for item in self]

    def __contains__(self, item):
        if is_string(item):
            item = _ITEMS_BY_KEYWORD.get(item)
            if item is None:
                return False
        return bool(item & self.items) and (item & self.items) == item

    def __iter__(self):
        return (item for item in ContainerItem if item in self.items)

    def __len__(self):
        return sum(1 for _ in self)

    def __eq__(self, other):
        if not isinstance(other, Container):
            return NotImplemented
        return self.items == other.items and self.array == other.array

    def __hash__(self):
        return hash((self.items, self.array))

    def __repr__(self):
        if self.array:
            return f'Container({self.keywords()!r})'
        return f'Container({", ".join(self.keywords())!r})'


class Direction(Enum):
    """
    Base direction of a string.
    """

    LTR = 'ltr'
    RTL = 'rtl'

    @classmethod
    def from_json(cls, value):
        """
        Reads a direction from its JSON form.

        :param value: 'ltr', 'rtl' or None.

        :return: the Direction, or NULL for a JSON null.

        :raises ValueError: for any other value.
        """
        if value is None:
            return NULL
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise ValueError(f'{value!r} is not a base direction')


_FIELDS = [
    'iri', 'reverse', 'type', 'language', 'direction', 'context', 'nest',
    'prefix', 'index', 'protected', 'container']


class TermDefinition(namedtuple('TermDefinition', _FIELDS)):
    """
    The immutable definition of a term.

    ``iri`` and ``reverse`` are always set. Every other field is None when
    the definition does not specify it; ``language`` and ``direction`` use
    NULL for an explicit null.
    """

    __slots__ = ()

    @property
    def is_prefix(self):
        return bool(self.prefix)

    @property
    def is_protected(self):
        return bool(self.protected)

    def same_other_than_protected(self, other):
        """
        Compares two definitions ignoring their protected flags.

        :param other: the other TermDefinition.

        :return: True if every other field is equal.
        """
        return self._replace(protected=None) == other._replace(protected=None)


class TermDefinitionBuilder(object):
    """
    Accumulates the fields of a term definition before freezing it.
    """

    def __init__(self):
        for field in _FIELDS:
            setattr(self, field, None)

    def build(self):
        """
        Freezes the accumulated fields.

        :return: the TermDefinition.
        """
        assert self.iri is not None, 'term definition built without an IRI'
        assert self.reverse is not None, \
            'term definition built without a reverse flag'
        return TermDefinition(**{f: getattr(self, f) for f in _FIELDS})
