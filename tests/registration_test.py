#!/usr/bin/python

"""Testcases for module registration"""

import unittest

import jinja2
from markupsafe import Markup

import securefilters
from securefilters import escaping, registration


class FakeEngine(object):
    """An engine object that may or may not have a filter map yet."""

    def __init__(self, filters=None):
        if filters is not None:
            self.filters = filters


class RegistrationTest(unittest.TestCase):
    """Testcases for module registration"""

    def check_all_filters(self, filters):
        """All eight filters are installed under their template names."""
        for name in ('html', 'js', 'jsAttr', 'uri', 'json', 'jsObj', 'css',
                     'style'):
            self.assertTrue(name in filters, name)
            self.assertTrue(callable(filters[name]), name)

    def test_configures_empty_object(self):
        """The filter map is created when absent."""
        engine = FakeEngine()
        self.assertTrue(securefilters.configure(engine) is engine)
        self.check_all_filters(engine.filters)
        self.assertEqual(8, len(engine.filters))
        self.assertTrue(engine.filters['jsAttr'] is escaping.escape_js_attr)

    def test_configures_existing_filters(self):
        """Unrelated filters already registered are kept."""
        def shout(value):
            """An unrelated filter."""
            return value.upper()
        filters = {'shout': shout, 'html': None}
        engine = FakeEngine(filters)
        securefilters.configure(engine)
        self.assertTrue(engine.filters is filters)
        self.assertTrue(filters['shout'] is shout)
        self.assertTrue(filters['html'] is escaping.escape_html)
        self.assertEqual(9, len(filters))

    def test_configures_dict(self):
        """Plain dicts keep their filter map under a "filters" key."""
        for engine in ({}, {'filters': None}, {'filters': {}}):
            self.assertTrue(securefilters.configure(engine) is engine)
            self.check_all_filters(engine['filters'])
        engine = {'filters': {'keep': len}, 'other': 1}
        securefilters.configure(engine)
        self.assertTrue(engine['filters']['keep'] is len)
        self.assertEqual(1, engine['other'])

    def test_filter_names(self):
        """Filter names map to the encoders in installation order."""
        self.assertEqual(
            ('html', 'js', 'jsAttr', 'uri', 'json', 'jsObj', 'css', 'style'),
            registration.TO_CONFIGURE)
        self.assertTrue(securefilters.FILTERS is registration.FILTERS)
        self.assertTrue(securefilters.js_obj is escaping.escape_js_obj)

    def test_mark_safe(self):
        """Wrapped filters return Markup with the same text."""
        engine = securefilters.configure(FakeEngine(), mark_safe=True)
        got = engine.filters['html']('<b>')
        self.assertTrue(isinstance(got, Markup))
        self.assertEqual('&lt;b&gt;', str(got))
        self.assertEqual('escape_js_attr', engine.filters['jsAttr'].__name__)

    def test_jinja2(self):
        """Compile and render a template that uses every kind of filter."""
        env = securefilters.configure(jinja2.Environment(autoescape=False))
        self.assertTrue('upper' in env.filters)
        template = env.from_string(
            '<script>\n'
            '  var config = {{ config|jsObj }};\n'
            '  var userId = parseInt("{{ userId|js }}",10);\n'
            '</script>\n'
            '<a href="/welcome/{{ userId|uri }}">'
            'Welcome {{ userName|html }}</a>\n'
            '<br>\n'
            '<a href="javascript:activate(\'{{ userId|jsAttr }}\')">'
            'Click here to activate {{ userName|html }}</a>\n'
            '<div style="color: {{ color|style }}"></div>')
        result = template.render(
            config={'stuff': [1, '2', False]},
            userId='\'"&<>`@',
            userName='John, Roberts & Smith',
            color='red;x:expression(1)')
        self.assertEqual(
            '<script>\n'
            '  var config = {"stuff":[1,"2",false]};\n'
            '  var userId = parseInt('
            '"\\x27\\x22\\x26\\x3C\\x3E\\x60\\x40",10);\n'
            '</script>\n'
            '<a href="/welcome/%27%22%26%3C%3E%60%40">'
            'Welcome John, Roberts &amp; Smith</a>\n'
            '<br>\n'
            '<a href="javascript:activate(\''
            '&#92;x27&#92;x22&#92;x26&#92;x3C&#92;x3E&#92;x60&#92;x40\')">'
            'Click here to activate John, Roberts &amp; Smith</a>\n'
            '<div style="color: red&#92;3b x&#92;3a expression&#92;28 1'
            '&#92;29 "></div>',
            result)

    def test_jinja2_autoescape(self):
        """
        With autoescaping on, only filters marked safe avoid being encoded a
        second time.
        """
        template = '<p title="{{ v|html }}">{{ v|jsObj }}</p>'
        env = securefilters.configure(
            jinja2.Environment(autoescape=True), mark_safe=True)
        self.assertEqual(
            '<p title="&lt;b&gt;">"\\x3Cb\\x3E"</p>',
            env.from_string(template).render(v='<b>'))
        env = securefilters.configure(jinja2.Environment(autoescape=True))
        self.assertEqual(
            '<p title="&amp;lt;b&amp;gt;">&#34;\\x3Cb\\x3E&#34;</p>',
            env.from_string(template).render(v='<b>'))


if __name__ == '__main__':
    unittest.main()
