import os

from setuptools import setup


ver_path = os.path.join(os.path.dirname(__file__), 'pngstash', 'version.py')
with open(ver_path) as ver_file:
    __version__ = ''
    exec(compile(ver_file.read(), ver_path, 'exec'))


requires = [
    'attrs',
]

tests_require = [
    'pytest',
]

classifiers = [
    'Programming Language :: Python :: 3',
    'Topic :: Multimedia :: Graphics',
]

setup(
    name='pngstash',
    version=__version__,
    description='Hide text messages in PNG chunks',
    classifiers=classifiers,
    keywords='png chunk steganography',
    packages=['pngstash', 'pngstash.tests'],
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.7',
    install_requires=requires,
    extras_require={'test': tests_require},
    entry_points={'console_scripts': ['pngstash = pngstash.main:main']},
)
