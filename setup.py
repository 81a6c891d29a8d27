# This file is part of oralib.

# Imports:

from setuptools import setup


# Setup script "main()":

setup(
    name='oralib',
    version='1.0.0',
    description='Reading and writing OpenRaster (.ora) layered images.',
    author='the oralib Development Team',
    license="GPLv2+",
    python_requires='>=3.8',

    packages=['oralib', 'oralib.layer'],
    install_requires=[
        'numpy',
        'Pillow>=9.1',
    ],
    extras_require={
        'test': ['pytest'],
    },
    test_suite='tests',
)
