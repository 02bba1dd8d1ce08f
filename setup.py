import re
from pathlib import Path
from setuptools import setup

info = (Path(__file__).parent / 'xlparts' / 'info.py').read_text(encoding='utf-8')
version = re.search(r'^__VERSION__ = "([^"]+)"', info, re.M).group(1)

read_me = Path(__file__).parent / 'README.md'
long_description = read_me.read_text(encoding='utf-8')

setup(
    name='xlparts',
    version=version,
    author='John Machin',
    author_email='sjmachin@lexicon.net',
    maintainer='Nguyen Ba Duc Tin',
    maintainer_email='nguyenbaduc.tin@gmail.com',
    packages=['xlparts'],
    install_requires=[
        'defusedxml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    description=(
        'Library for developers to locate and read the parts of '
        'Microsoft Excel (tm) 2007+ workbook containers'
    ),
    long_description=long_description,
    long_description_content_type='text/markdown',
    platforms=["Any platform -- don't need Windows"],
    license='BSD',
    keywords=['xlsx', 'xlsb', 'excel', 'spreadsheet', 'workbook', 'opc'],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.6',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Operating System :: OS Independent',
        'Topic :: Database',
        'Topic :: Office/Business',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires=">=3.6",
)
