"""
Coursecart - Canvas Common Cartridge packages from plain text files

Installation:
    pip install -e .

This installs the 'coursecart' command in your environment.
"""

from setuptools import setup, find_packages
import os

# Read README for long description
long_description = ''
if os.path.exists('README.md'):
    with open('README.md', 'r', encoding='utf-8') as f:
        long_description = f.read()

setup(
    name='coursecart',
    version='1.0.0',
    description='Build Canvas-ready IMS Common Cartridge course packages',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',

    # Find all packages (coursecart/ and any subpackages)
    packages=find_packages(exclude=['tests', 'tests.*', 'docs']),

    include_package_data=True,

    # Python version requirement (asyncio.to_thread)
    python_requires='>=3.9',

    # Dependencies
    install_requires=[
        'click>=8.0',
        'python-frontmatter>=1.0',
        'PyYAML>=6.0',
        'markdown>=3.4',
        'beautifulsoup4>=4.11',
        'lxml>=4.9',
        'mammoth>=1.6',
    ],

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.4',
            'pytest-cov>=4.1',
            'pytest-mock>=3.11',
        ],
    },

    # CLI entry point - this creates the 'coursecart' command
    entry_points={
        'console_scripts': [
            'coursecart=coursecart.cli:cli',
        ],
    },

    # Classifiers for PyPI
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Education',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Education',
    ],

    # Keywords for discoverability
    keywords='canvas lms education imscc common-cartridge',
)
