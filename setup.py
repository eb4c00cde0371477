# -*- coding: utf-8 -*-
"""
PyLD-Context
============

PyLD-Context_ is a Python implementation of JSON-LD_ 1.1 context
processing.

.. _PyLD-Context: http://github.com/digitalbazaar/pyld
.. _JSON-LD: http://json-ld.org/
"""

from setuptools import setup
import os

# get meta data
about = {}
with open(os.path.join(
        os.path.dirname(__file__), 'lib', 'ldcontext', '__about__.py')) as fp:
    exec(fp.read(), about)

with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as fp:
    long_description = fp.read()

setup(
    name='PyLD-Context',
    version=about['__version__'],
    description='Python implementation of JSON-LD 1.1 context processing',
    long_description=long_description,
    author='Digital Bazaar',
    author_email='support@digitalbazaar.com',
    url='http://github.com/digitalbazaar/pyld',
    packages=['ldcontext', 'ldcontext.documentloader'],
    package_dir={'': 'lib'},
    license='BSD 3-Clause license',
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet',
        'Topic :: Software Development :: Libraries',
    ],
    install_requires=[],
    extras_require={
        'requests': ['requests'],
        'aiohttp': ['aiohttp'],
        'test': ['pytest'],
    }
)
