"""
Explicit JSON null marker.

Context fields distinguish three states: absent (``None``), explicitly
set to null (``NULL``) and set to a value.
"""


class _Null(object):
    """
    Singleton standing for a JSON-LD entry explicitly set to null.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'NULL'

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Null, ())


NULL = _Null()


def is_null(v):
    """
    Returns True if the given value is the explicit null marker.

    :param v: the value to check.

    :return: True if the value is NULL, False if not.
    """
    return v is NULL


def value_of(v):
    """
    Collapses a three-state value to a plain optional one.

    :param v: None, NULL or a value.

    :return: the value, or None if it is absent or NULL.
    """
    return None if v is None or v is NULL else v
