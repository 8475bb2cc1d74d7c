# -*- coding: utf8 -*-
import codecs
import re
from os import path

from setuptools import find_namespace_packages, setup


def read(*parts):
    file_path = path.join(path.dirname(__file__), *parts)
    return codecs.open(file_path, encoding='utf-8').read()


version = re.search(
    r'^VERSION\s*=\s*[\'"]([^\'"]*)[\'"]',
    read('adhdone', 'core', 'constants.py'),
    re.MULTILINE
).group(1)


def requirements(filename):
    return [
        line.strip() for line in read(filename).splitlines()
        if line.strip() and not line.startswith(('#', '-r'))
    ]


setup(
    name="adhdone",
    version=version,
    description='AI-powered ADHD task coach exposed as an MCP server',
    long_description=read('README.md'),
    long_description_content_type='text/markdown',
    packages=find_namespace_packages(include=['adhdone', 'adhdone.*'], exclude=['adhdone.tests', 'adhdone.tests.*']),
    py_modules=['run'],
    python_requires='>=3.10',
    install_requires=requirements('requirements.txt'),
    extras_require={'test': requirements('requirements-dev.txt')},
    license='MIT',
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'adhdone-server=run:main',
            'adhdone-stdio=adhdone.mcp.server:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ]
)
