#!/usr/bin/env python

"""Setup file and install script for Illumina bcl to bam demultiplexing"""

import os
import subprocess

import setuptools

VERSION = '0.3.0'

# add version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (subprocess.SubprocessError, OSError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'bcldemux', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# illumina2bam and BamIndexDecoder jars and a Java runtime are installed separately
setuptools.setup(name='bcldemux',
                 version=VERSION,
                 description='Demultiplex Illumina runs with illumina2bam and BamIndexDecoder',
                 packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
                 scripts=['scripts/bcldemux_wrapper.py'],
                 python_requires='>=3.8',
                 install_requires=['Logbook', 'PyYAML', 'toolz'],
                 extras_require={'test': ['pytest', 'pytest-mock']})
