import re

from setuptools import find_packages, setup


def get_version():
    with open('spanr/__init__.py', 'r') as fh:
        return re.search(r"^__version__ = '([^']+)'", fh.read(), re.MULTILINE).group(1)


VERSION = get_version()


def parse_md_readme():
    """
    use the readme as the long description when it is present
    """
    try:
        with open('README.md', 'r') as fh:
            return fh.read()
    except OSError:
        return ''


TEST_REQS = [
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand>=0.1.2',
    'numpy>=1.13.1',
    'pandas>=1.1.0',
    'PyYAML>=5.1',
]


setup(
    name='spanr',
    version='{}'.format(VERSION),
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Set operations on chromosome ranges stored as run lists',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS,
    },
    python_requires='>=3.6',
    test_suite='tests',
    entry_points={
        'console_scripts': [
            'spanr = spanr.main:main',
        ]
    },
)
