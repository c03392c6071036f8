# errors.py


class SimulationError(Exception):
    """Base class for every error that aborts a simulation run."""


class FileOpenError(SimulationError):
    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = f"Error in opening file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class AllocationError(SimulationError):
    def __init__(self, num_lines):
        self.num_lines = num_lines
        super().__init__(f"Error in allocating memory for {num_lines} cache lines")


class InvalidConfiguration(SimulationError):
    pass


class MalformedTraceToken(SimulationError):
    """A trace token that is not an unsigned decimal address."""

    def __init__(self, token, line_no):
        self.token = token
        self.line_no = line_no
        super().__init__(f"Malformed trace token {token!r} on line {line_no}")


class EmptyTraceError(SimulationError):
    def __init__(self):
        super().__init__("Trace contained no addresses; miss rate is undefined")


class OutputError(SimulationError):
    """A result, trace or plot file could not be written."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        msg = f"Error in writing file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
