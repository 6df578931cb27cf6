class ResumableError(Exception):
    pass


class StreamUsageError(ResumableError):
    pass


class PipeActiveError(StreamUsageError):
    pass


class SinkClosedError(ResumableError):
    pass


class SourceDestroyedError(ResumableError):
    pass
