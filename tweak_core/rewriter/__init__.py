"""
Locate, format and atomically rewrite numeric literals in source files.
"""
from .tracked_param import ParamState, TrackedParam
from .value_formatter import ValueFormatter
from .text_locator import TextLocator
from .atomic_writer import read_text_exact, write_text_atomic
from .file_rewriter import FileRewriter

__all__ = ['ParamState', 'TrackedParam', 'ValueFormatter', 'TextLocator',
           'read_text_exact', 'write_text_atomic', 'FileRewriter']
