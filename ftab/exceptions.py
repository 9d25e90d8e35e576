class FtabException(Exception):
    '''Base class to extend in order to throw exception in ftab.

    It takes the chain of the fields that caused the exception and an
    optional human readable message.
    '''

    def __init__(self, message='', chain=None):
        self.chain = chain if chain is not None else []
        self.message = message
        super().__init__(message)

    def __str__(self):
        if not self.chain:
            return self.message

        return '%s (at %s)' % (self.message, '.'.join(self.chain))


class UnpackException(FtabException):
    pass


class MagicException(FtabException):
    pass


class ChunkUnpackException(FtabException):
    pass


class PackException(FtabException):
    '''A value cannot be represented with the width of its field.'''
    pass


class DecodeError(FtabException):
    '''The binary image is structurally invalid.'''
    pass


class MalformedHeader(DecodeError):
    pass


class TruncatedSegmentTable(DecodeError):
    pass


class TruncatedPayload(DecodeError):

    def __init__(self, message='', chain=None, tag=None):
        super().__init__(message, chain=chain)
        self.tag = tag


class TicketOutOfBounds(DecodeError):
    pass


class EncodeError(FtabException):
    '''The layout cannot be represented by the format.'''
    pass


class SegmentTooLarge(EncodeError):
    pass


class TooManySegments(EncodeError):
    pass


class ManifestError(FtabException):
    pass


class MissingFile(ManifestError):

    def __init__(self, message='', chain=None, path=None):
        super().__init__(message, chain=chain)
        self.path = path


class InvalidTag(ManifestError, ValueError):
    pass


class InvalidField(ManifestError, ValueError):
    pass


class FileOpError(FtabException):
    '''An I/O operation on one of the files of an image failed.

    It keeps which action failed, a short description of the file involved and
    its path; the OSError is chained as the cause.
    '''

    def __init__(self, action, name, path, error):
        self.action = action
        self.name = name
        self.path = path
        self.error = error
        super().__init__(f"failed to {action} {name} at path '{path}': {error}")
