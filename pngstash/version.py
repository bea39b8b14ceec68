"""The version for pngstash"""
# setup.py exec's this file, so it must not import anything.

# (major, minor, micro)
version_info = (0, 1, 0)

__version__ = '.'.join(str(part) for part in version_info)
