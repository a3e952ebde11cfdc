import errno
import os
import typing

import tgd
import tgd.core
import tgd.core.size
import tgd.log

logger = tgd.log.get_logger(__name__)

EMPTY = -1

# Descriptors below this value are standard streams owned by the process.
_FIRST_OWNED_DESCRIPTOR = 2

Error = tgd.core.Error
OsError = tgd.core.OsError


class SelfTransferError(Error):
    def __init__(self, handle):
        super().__init__(
            "Handle with descriptor {} cannot be assigned to itself".format(
                handle.descriptor
            )
        )


class Handle:
    """
    Exclusive owner of one operating system file descriptor.

    A handle is either open, holding a descriptor, or empty, holding
    :data:`EMPTY`. Ownership moves with :meth:`move` and :meth:`assign`
    and is never duplicated, so copying is refused. The descriptor is
    released by :meth:`close`, at the end of a ``with`` block or when the
    handle is garbage collected. Only the explicit :meth:`close` reports
    failures; the implicit paths log and discard them.

    Descriptors 0 and 1 belong to the process and are never closed.
    """

    def __init__(self, descriptor: int = EMPTY):
        self.__descriptor = descriptor

    @classmethod
    def open(cls, path, flags: int, *args) -> "Handle":
        try:
            descriptor = os.open(path, flags, *args)
        except OSError as error:
            raise OsError.wrap(
                error,
                "Error opening file '{}': ".format(os.fsdecode(path)),
                path,
            ) from error

        logger.debug("file_opened", path=os.fsdecode(path), descriptor=descriptor)

        return cls(descriptor)

    def __repr__(self):
        return "<{} descriptor={}>".format(type(self).__name__, self.__descriptor)

    def __enter__(self) -> "Handle":
        return self

    def __exit__(self, *args):
        self.__release()

    def __del__(self):
        # __init__ may not have run.
        if "_Handle__descriptor" in self.__dict__:
            self.__release()

    def __copy__(self):
        raise TypeError("{} cannot be copied".format(type(self).__name__))

    def __deepcopy__(self, memo):
        raise TypeError("{} cannot be copied".format(type(self).__name__))

    def __reduce__(self):
        raise TypeError("{} cannot be pickled".format(type(self).__name__))

    @property
    def descriptor(self) -> int:
        return self.__descriptor

    def fileno(self) -> int:
        return self.__descriptor

    def is_empty(self) -> bool:
        return self.__descriptor == EMPTY

    def move(self) -> "Handle":
        handle = type(self)(self.__descriptor)
        self.__descriptor = EMPTY

        return handle

    def assign(self, source: "Handle") -> "Handle":
        if source is self:
            raise SelfTransferError(self)

        self.__release()

        self.__descriptor = source.__descriptor
        source.__descriptor = EMPTY

        return self

    def close(self):
        if self.__descriptor < _FIRST_OWNED_DESCRIPTOR:
            return

        descriptor = self.__descriptor
        self.__descriptor = EMPTY

        try:
            os.close(descriptor)
        except OSError as error:
            raise OsError.wrap(error, "Error closing file: ") from error

        logger.debug("file_closed", descriptor=descriptor)

    def __release(self):
        descriptor = self.__descriptor

        try:
            self.close()
        except OsError as error:
            logger.debug(
                "file_release_failed",
                descriptor=descriptor,
                errno=error.errno,
                error=str(error),
            )

    def size(self, strategy: typing.Optional[str] = None) -> int:
        if self.is_empty():
            raise OsError(errno.EBADF, "Could not get file size: ")

        return tgd.core.size.query(self.__descriptor, strategy)


# pylint: disable=redefined-builtin
def open(path, flags: int, *args) -> "Handle":
    return Handle.open(path, flags, *args)
