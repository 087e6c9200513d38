#!/usr/bin/env python3

from setuptools import setup, find_packages

setup(
    name='mixtape-importer',
    version='1.0.0',
    description='Art of the Mix importer - scrapes mixtapes into JSON content files',
    author='Mixtape Importer',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'mixtapes=mixtapes.cli:main',
        ],
    },
    install_requires=[
        # HTTP and HTML parsing
        'requests>=2.28.0',
        'beautifulsoup4>=4.11.0',

        # Retry and resilience
        'tenacity>=8.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Internet :: WWW/HTTP',
    ],
    python_requires='>=3.8',
)
