#!/usr/bin/env python

from setuptools import setup, find_packages
import os

long_description = open("README.rst").read()
install_requires = ['numpy>=1.18.5',
                    'quantities>=0.12.1']
extras_require = {
    'test': ['pytest'],
}
extras_require["all"] = sum(extras_require.values(), [])

with open(os.path.join("tdtsev", "version.py")) as fp:
    d = {}
    exec(fp.read(), d)
    tdtsev_version = d['version']

setup(
    name="tdtsev",
    version=tdtsev_version,
    packages=find_packages(include=["tdtsev", "tdtsev.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    author="tdtsev authors and contributors",
    description="tdtsev reads TDT SEV streaming recordings, split by channel "
                "and by hour, into continuous numpy buffers",
    long_description=long_description,
    license="BSD-3-Clause",
    python_requires=">=3.8",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Scientific/Engineering']
)
