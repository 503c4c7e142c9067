#!/usr/bin/env python
""" Safe SqlAlchemy queries from HTTP query strings: pagination, sorting, filtering, search, preloading """

from setuptools import setup, find_packages

setup(
    name='queryopts',
    version='1.0.0',
    author='Mark Vartanyan',
    author_email='kolypto@gmail.com',

    url='https://github.com/kolypto/py-queryopts',
    license='BSD',
    description=__doc__,
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    keywords=['sqlalchemy', 'flask', 'pagination', 'rest'],

    packages=find_packages(exclude=('tests',)),
    scripts=[],
    entry_points={},

    python_requires='>= 3.7',
    install_requires=[
        'sqlalchemy >= 1.4.0, < 2.1',
        'flask >= 2.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'nox',
        ],
    },
    include_package_data=True,

    platforms='any',
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Framework :: Flask',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
)
