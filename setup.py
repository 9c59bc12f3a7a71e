from setuptools import setup, find_packages
import re

# Read version from taxcurve/__init__.py
with open('taxcurve/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='tax-curve',
    version=version,
    packages=find_packages(include=['taxcurve', 'taxcurve.*']),
    package_data={
        'taxcurve': ['tax-rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tax-curve=taxcurve.cli.__main__:main',
        ],
    },
    author='Personal',
    description='German income tax curves and inflation adjustment.',
    python_requires='>=3.10',
)
