"""awsassume setup"""

from awsassume import __version__
from setuptools import setup, find_packages
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='awsassume',
    version=__version__,
    description='Exchange an AWS source profile for temporary assume_role credentials',
    long_description=long_description,
    author='awsassume developers',
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='aws sts assume_role mfa credentials',
    packages=find_packages(exclude=['tests']),
    python_requires='>=3.6',
    install_requires=[
        'boto3',
        'botocore',
        'docopt',
        'PyYAML',
        'cerberus',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'awsassume=awsassume.assume:main',
        ],
    },

)
