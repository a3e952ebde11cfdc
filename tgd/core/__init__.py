import os


class Error(RuntimeError):
    pass


class OsError(OSError):
    """
    Failure reported by the operating system for a descriptor operation.

    Carries the OS error code in ``errno``, the offending path in ``filename``
    where one exists and a human-readable ``context`` naming the operation.
    """

    def __init__(self, code: int, context: str, path=None):
        if path is None:
            super().__init__(code, os.strerror(code))
        else:
            super().__init__(code, os.strerror(code), path)

        self.context = context

    def __str__(self):
        return "{}{}".format(self.context, self.strerror)

    @classmethod
    def wrap(cls, error: OSError, context: str, path=None) -> "OsError":
        code = error.errno
        if code is None:
            code = 0

        return cls(code, context, path)
