import os
import sys
from setuptools import setup, find_packages

# load __version__ without importing anything
version_file = os.path.join(
    os.path.dirname(__file__),
    'wellschematic/version.py')
with open(version_file, 'r') as f:
    # use eval to get a clean string of version from file
    __version__ = eval(f.read().strip().split('=')[-1])

with open("README.md", "r") as f:
    long_description = f.read()

# the geometry engine, polygon builder, mapper and configuration
requirements_default = set([
    'numpy',
    'scipy',
    'pandas',
    'pint',
    'pydantic>=2',
    'PyYAML',
])

# rendering a drawing as a figure
requirements_easy = set([
    'plotly',
])

requirements_test = set([
    'pytest',
])

requirements_all = requirements_easy.union(requirements_test)

# if someone wants to output a requirements file
# `python setup.py --list-all > requirements.txt`
if '--list-all' in sys.argv:
    # will not include default requirements (numpy)
    print('\n'.join(requirements_all))
    exit()
elif '--list-easy' in sys.argv:
    print('\n'.join(requirements_easy))
    exit()

setup(
    name='wellschematic',
    version=__version__,
    description='Wellbore schematic diagrams from trajectory and annotation rows',
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=[
        'well',
        'trajectory',
        'wellbore',
        'schematic',
        'diagram',
        'completion',
        'perforation',
        'plug',
        'drilling',
        'well engineering',
        'visualization',
    ],
    license='Apache 2.0',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Natural Language :: English',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Visualization',
    ],
    python_requires='>=3.9',
    packages=find_packages(exclude=["tests"]),
    package_data={
        'wellschematic': [
            'data/*.yaml',
        ]
    },
    install_requires=list(requirements_default),
    extras_require={
        'easy': list(requirements_easy),
        'test': list(requirements_test),
        'all': list(requirements_all)
    }
)
