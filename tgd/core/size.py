import ctypes
import errno
import os
import sys
import typing

import tgd
import tgd.core
import tgd.core.validation
import tgd.log

logger = tgd.log.get_logger(__name__)

_CONTEXT = "Could not get file size: "

STAT = "stat"
LENGTH = "length"

STRATEGIES = (STAT, LENGTH)

if sys.platform == "win32":
    DEFAULT_STRATEGY = LENGTH
else:
    DEFAULT_STRATEGY = STAT


class UnknownStrategyError(tgd.core.Error):
    def __init__(self, name):
        super().__init__(
            "Size strategy {} is unknown, expected one of {}".format(
                name,
                ", ".join(STRATEGIES),
            )
        )


def _stat(descriptor: int) -> int:
    try:
        return os.fstat(descriptor).st_size
    except OSError as error:
        raise tgd.core.OsError.wrap(error, _CONTEXT) from error


def _load_filelength() -> typing.Optional[typing.Callable[[int], int]]:
    if sys.platform != "win32":
        return None

    runtime = ctypes.CDLL("ucrtbase", use_errno=True)
    filelength = runtime._filelengthi64
    filelength.argtypes = [ctypes.c_int]
    filelength.restype = ctypes.c_int64

    return filelength


_FILELENGTH = _load_filelength()


def _length(descriptor: int) -> int:
    if _FILELENGTH is not None:
        with tgd.core.validation.ParameterValidationGuard():
            size = _FILELENGTH(descriptor)

        if size < 0:
            raise tgd.core.OsError(ctypes.get_errno() or errno.EBADF, _CONTEXT)

        return size

    try:
        position = os.lseek(descriptor, 0, os.SEEK_CUR)
        try:
            return os.lseek(descriptor, 0, os.SEEK_END)
        finally:
            os.lseek(descriptor, position, os.SEEK_SET)
    except OSError as error:
        raise tgd.core.OsError.wrap(error, _CONTEXT) from error


_BACKENDS: typing.Dict[str, typing.Callable[[int], int]] = {
    STAT: _stat,
    LENGTH: _length,
}

_selected = DEFAULT_STRATEGY


def default() -> str:
    return _selected


def select(name: str):
    global _selected

    if name not in _BACKENDS:
        raise UnknownStrategyError(name)

    _selected = name
    logger.debug("size_strategy_selected", strategy=name)


def query(descriptor: int, strategy: typing.Optional[str] = None) -> int:
    """
    Return the current size in bytes of the file open at ``descriptor``.

    ``strategy`` names the backend to ask, ``stat`` or ``length``; both
    report the same size for the same file and neither moves the file
    offset. Without one, the strategy chosen by :func:`select` is used.
    Raises :class:`tgd.core.OsError` when the query fails.
    """
    if strategy is None:
        strategy = _selected

    if strategy not in _BACKENDS:
        raise UnknownStrategyError(strategy)

    return _BACKENDS[strategy](descriptor)
