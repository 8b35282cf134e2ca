from .version import __version__ as __version__

__title__ = "rc4kit"
__description__ = "RC4 stream cipher toolkit with a text-friendly command line."
__author__ = "Saudade Z"
__email__ = "saudadez217@gmail.com"
__license__ = "Apache-2.0"
