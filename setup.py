#!/usr/bin/env python3
"""MDAD - Setup Configuration"""

from setuptools import setup, find_packages
import os

def get_version():
    return '1.0.0'

def get_long_description():
    readme_file = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_file):
        with open(readme_file, 'r', encoding='utf-8') as f:
            return f.read()
    return ''

setup(
    name='mdad-fusion',
    version=get_version(),
    description='Multi-Domain Threat Fusion: spatiotemporal clustering and Bayesian scoring of intelligence signals',
    long_description=get_long_description(),
    long_description_content_type='text/markdown',
    packages=find_packages(where='.', include=['mdad', 'mdad.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.21.0',
    ],
    extras_require={
        'dev': ['pytest>=7.0.0', 'pytest-cov>=4.0.0', 'black>=23.0.0', 'flake8>=6.0.0'],
        'viz': ['matplotlib>=3.4.0', 'pandas>=1.3.0'],
    },
    entry_points={
        'console_scripts': ['mdad-demo=mdad.demo:main'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: GNU Affero General Public License v3',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords=['intelligence', 'fusion', 'clustering', 'bayesian', 'geospatial', 'threat-assessment'],
)
