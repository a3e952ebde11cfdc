import ctypes
import sys
import typing

import tgd
import tgd.log

logger = tgd.log.get_logger(__name__)


def _ignore_invalid_parameter(expression, function, file, line, reserved):
    pass


def _load_setter() -> typing.Optional[typing.Callable[[int], int]]:
    if sys.platform != "win32":
        return None

    runtime = ctypes.CDLL("ucrtbase")
    setter = runtime._set_thread_local_invalid_parameter_handler
    setter.argtypes = [ctypes.c_void_p]
    setter.restype = ctypes.c_void_p

    return setter


if sys.platform == "win32":
    _HANDLER_TYPE = ctypes.CFUNCTYPE(
        None,
        ctypes.c_wchar_p,
        ctypes.c_wchar_p,
        ctypes.c_wchar_p,
        ctypes.c_uint,
        ctypes.c_void_p,
    )

    # Must stay referenced for as long as the runtime may call it.
    _IGNORE_CALLBACK = _HANDLER_TYPE(_ignore_invalid_parameter)
    _IGNORE_HANDLER = ctypes.cast(_IGNORE_CALLBACK, ctypes.c_void_p).value
else:
    _IGNORE_HANDLER = None

_SETTER = _load_setter()


class ParameterValidationGuard:
    """
    Disable the C runtime parameter validation of the current thread and
    reenable it automatically when the scope closes.

    The C runtime aborts the process when a function such as
    ``_filelengthi64`` receives an invalid descriptor. While the guard is
    held, such calls fail with ``EBADF`` instead. The previous handler is
    restored on exit regardless of how the scope is left. Every instance
    keeps its own saved handler, so guards can be nested.

    On platforms without the C runtime handler this does nothing.
    """

    def __init__(
        self,
        setter: typing.Optional[typing.Callable[[int], int]] = None,
        handler: typing.Optional[int] = None,
    ):
        if setter is None:
            setter = _SETTER
            handler = _IGNORE_HANDLER

        self.__setter = setter
        self.__handler = handler
        self.__previous = None
        self.__active = False

    @property
    def active(self) -> bool:
        return self.__active

    def __enter__(self) -> "ParameterValidationGuard":
        if self.__active:
            raise RuntimeError("Parameter validation guard is already active")

        if self.__setter is not None:
            self.__previous = self.__setter(self.__handler)
            logger.debug("parameter_validation_disabled")

        self.__active = True
        return self

    def __exit__(self, *args):
        try:
            if self.__setter is not None:
                self.__setter(self.__previous)
                logger.debug("parameter_validation_restored")
        finally:
            self.__previous = None
            self.__active = False
