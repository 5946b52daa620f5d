from setuptools import setup, find_packages

import duo_frame

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setup(
    name='duo-frame',
    version=duo_frame.version,
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0', 'responses>=0.23.0'],
    },
    description="Complete a Duo second-factor challenge from the command line or from Python",
    long_description=open("LONG_DESCRIPTION.md").read(),
    long_description_content_type='text/markdown',
    python_requires=">=3.7",
    license='Apache License, v2.0',
    packages=find_packages(exclude=('tests', 'docs')),
    test_suite="tests",
    scripts=['bin/duo-frame'],
    classifiers=[
        'Natural Language :: English',
        'Programming Language :: Python :: 3 :: Only',
        'License :: OSI Approved :: Apache Software License'
    ]
)
