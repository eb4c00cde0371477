import pytest

from ldcontext.iri import (
    ends_with_gen_delim, is_absolute_iri, is_blank_node_identifier,
    is_compact_iri, is_iri_reference, remove_dot_segments, resolve,
    split_prefix)

RFC_BASE = 'http://a/b/c/d;p?q'


# ---------- Tests for resolve() ----------
class TestResolve:
    def test_absolute_iri_no_base(self):
        assert resolve('http://example.org/') == 'http://example.org/'

    def test_absolute_iri_with_base(self):
        assert resolve('http://example.org/', 'http://base.org/') == \
            'http://example.org/'

    def test_absolute_iri_removes_dots(self):
        assert resolve('http://abc/../../') == 'http://abc/'

    def test_empty_value_uses_base(self):
        assert resolve('', 'http://base.org/') == 'http://base.org/'

    def test_relative_without_base_error(self):
        with pytest.raises(
                ValueError,
                match=r"Found invalid relative IRI 'abc' for a missing base "
                      r"IRI"):
            resolve('abc')

    def test_non_absolute_base_error(self):
        with pytest.raises(
                ValueError,
                match=r"Found invalid base IRI 'def' for value 'abc'"):
            resolve('abc', 'def')

    def test_invalid_reference_error(self):
        with pytest.raises(
                ValueError, match=r"Found invalid IRI reference 'a b'"):
            resolve('a b', 'http://base.org/')

    def test_base_without_path(self):
        assert resolve('abc', 'http://base.org') == 'http://base.org/abc'

    def test_fragment_of_base_is_dropped(self):
        assert resolve('abc', 'http://base.org/#frag') == 'http://base.org/abc'

    def test_network_path(self):
        assert resolve('//abc', 'http://base.org/') == 'http://abc'

    @pytest.mark.parametrize('reference, expected', [
        ('g:h', 'g:h'),
        ('g', 'http://a/b/c/g'),
        ('./g', 'http://a/b/c/g'),
        ('g/', 'http://a/b/c/g/'),
        ('/g', 'http://a/g'),
        ('//g', 'http://g'),
        ('?y', 'http://a/b/c/d;p?y'),
        ('g?y', 'http://a/b/c/g?y'),
        ('#s', 'http://a/b/c/d;p?q#s'),
        ('g#s', 'http://a/b/c/g#s'),
        (';x', 'http://a/b/c/;x'),
        ('', 'http://a/b/c/d;p?q'),
        ('.', 'http://a/b/c/'),
        ('./', 'http://a/b/c/'),
        ('..', 'http://a/b/'),
        ('../g', 'http://a/b/g'),
        ('../..', 'http://a/'),
        ('../../g', 'http://a/g'),
    ])
    def test_rfc3986_normal_examples(self, reference, expected):
        assert resolve(reference, RFC_BASE) == expected

    @pytest.mark.parametrize('reference, expected', [
        ('../../../g', 'http://a/g'),
        ('/./g', 'http://a/g'),
        ('/../g', 'http://a/g'),
        ('g.', 'http://a/b/c/g.'),
        ('..g', 'http://a/b/c/..g'),
        ('./g/.', 'http://a/b/c/g/'),
        ('g;x=1/../y', 'http://a/b/c/y'),
    ])
    def test_rfc3986_abnormal_examples(self, reference, expected):
        assert resolve(reference, RFC_BASE) == expected


# ---------- Tests for remove_dot_segments() ----------
class TestRemoveDotSegments:
    def test_no_dots(self):
        assert remove_dot_segments('/a/b/c') == '/a/b/c'

    def test_rfc_example(self):
        assert remove_dot_segments('/a/b/c/./../../g') == '/a/g'

    def test_relative_rfc_example(self):
        assert remove_dot_segments('mid/content=5/../6') == 'mid/6'

    def test_only_dots(self):
        assert remove_dot_segments('..') == ''
        assert remove_dot_segments('/..') == '/'


class TestClassification:
    def test_split_prefix(self):
        assert split_prefix('ex:a:b') == ('ex', 'a:b')
        assert split_prefix('name') is None

    def test_absolute_iri(self):
        assert is_absolute_iri('http://example.com/')
        assert is_absolute_iri('urn:isbn:0451450523')
        assert not is_absolute_iri('relative/path')
        assert not is_absolute_iri('1ex:foo')
        assert not is_absolute_iri('http://example.com/a b')

    def test_iri_reference(self):
        assert is_iri_reference('a/b?c#d')
        assert is_iri_reference('%20')
        assert not is_iri_reference('%zz')
        assert not is_iri_reference('<a>')

    def test_blank_node_identifier(self):
        assert is_blank_node_identifier('_:b0')
        assert not is_blank_node_identifier('ex:b0')

    def test_compact_iri(self):
        assert is_compact_iri('ex:name')
        assert not is_compact_iri('_:b0')
        assert not is_compact_iri('http://example.com/')
        assert not is_compact_iri(':name')
        assert not is_compact_iri('name')

    @pytest.mark.parametrize('value', [
        'http://example.com/', 'http://example.com#', 'urn:ex:', 'ex?',
        'ex[', 'ex]', 'ex@'])
    def test_ends_with_gen_delim(self, value):
        assert ends_with_gen_delim(value)

    def test_does_not_end_with_gen_delim(self):
        assert not ends_with_gen_delim('http://example.com/a')
        assert not ends_with_gen_delim('')
