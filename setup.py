from setuptools.command.sdist import sdist as SetuptoolsSdist
from setuptools import setup, find_packages
import os
import shutil

from src import (
    PROJECT_NAME, PROJECT_DESCRIPTION, README_PATH, BUILTIN_YAML, __version__
)


class SdistAndClean(SetuptoolsSdist):
    '''
    Runs the default setuptools sdist command and then cleans the egg info
    directory.
    '''

    def run(self):
        SetuptoolsSdist.run(self)

        for distfile in self.filelist.files:
            if distfile.endswith('PKG-INFO'):
                egginfo_dir = os.path.dirname(distfile)
                shutil.rmtree(egginfo_dir)


def package_names():
    return [PROJECT_NAME] + \
        [PROJECT_NAME + '.' + package for package in find_packages('src')]

long_description = None
with open(README_PATH, 'r') as readme:
    long_description = readme.read()

setup(
    cmdclass={
        'sdist': SdistAndClean,
    },
    name=PROJECT_NAME,
    version=__version__,
    description=PROJECT_DESCRIPTION,
    long_description=long_description or PROJECT_DESCRIPTION,
    long_description_content_type='text/markdown',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Database',
    ],
    python_requires='>=3.9',
    packages=package_names(),
    # The built-in YAML settings must ship with the package, MANIFEST.in
    # covers the sdist
    include_package_data=True,
    package_data={PROJECT_NAME: [BUILTIN_YAML]},
    package_dir={PROJECT_NAME: 'src'},
    install_requires=[
        'pyxdg',
        'pyyaml',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            PROJECT_NAME+'='+PROJECT_NAME+'.sqlite_dump:main',
        ],
    },
)
