#!/usr/bin/env python
import os
import sys

from setuptools import setup, find_packages

if sys.version_info < (3, 8):
    error = "ERROR: s3deploy requires Python 3.8+ ... exiting."
    print(error, file=sys.stderr)
    sys.exit(1)

VERSION = '0.0.0'
static = os.path.join(os.path.dirname(os.path.abspath(__file__)), 's3deploy',
                      'static.py')
with open(static) as fp:
    for line in fp:
        # pull VERSION from static.py
        if line.startswith('VERSION = '):
            VERSION = line.split('=', 1)[1].strip().strip("'\"")
            break

with open(os.path.join(os.path.dirname(os.path.abspath(__file__)),
                       'README.rst')) as fp:
    README = fp.read()

console_scripts = ['s3deploy = s3deploy.cli:main']

setup(
    name='s3deploy',
    version=VERSION,
    packages=find_packages(),
    license='LGPL3',
    description="Incremental deployment of static sites to S3 with "
    "CloudFront invalidation",
    long_description=README,
    long_description_content_type='text/x-rst',
    python_requires='>=3.8',
    install_requires=[
        "boto3>=1.26",
        "botocore>=1.29",
        "progressbar2>=4.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "moto[s3,cloudformation]>=5.0"],
    },
    include_package_data=True,
    entry_points=dict(console_scripts=console_scripts),
    zip_safe=False,
    classifiers=[
        'Environment :: Console',
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: GNU Library or Lesser General Public '
        'License (LGPL)',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
)
