#!/usr/bin/python3

from codecs import open
from os import path
from setuptools import setup, find_packages

here = path.abspath(path.dirname(__file__))

with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

with open(path.join(here, 'requirements.txt'), encoding='utf-8') as f:
    requirements = [line.strip() for line in f if line.strip()]

setup(
    name='wdmsim',
    version='0.1.0',
    description='physical layer performance simulator for WDM optical networks',
    long_description=long_description,
    long_description_content_type='text/x-rst; charset=UTF-8',
    author='wdmsim contributors',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Telecommunications Industry',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: Implementation :: CPython',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Physics',
    ],
    keywords='optics network fiber communication osnr dispersion wdm',
    packages=find_packages(exclude=['docs', 'tests']),  # Required
    package_data={'wdmsim': ['example-data/*.json']},
    install_requires=requirements,
    extras_require={'tests': ['pytest']},
    entry_points={
        'console_scripts': [
            'wdmsim-performance=wdmsim.tools.cli_examples:performance_main_example',
            'wdmsim-example-data=wdmsim.tools.cli_examples:show_example_data_dir',
        ],
    },
)
