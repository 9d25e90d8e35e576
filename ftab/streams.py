import io


class Stream(object):
    '''This is a simple wrapper around bytes to have a file-like object
    whose seek() returns the stream itself.'''
    def __init__(self, data):
        self.obj = io.BytesIO(bytes(data))

    def seek(self, offset):
        self.obj.seek(offset)

        return self

    def tell(self):
        return self.obj.tell()

    def read(self, size=-1):
        return self.obj.read(size)

    def write(self, data):
        return self.obj.write(data)

    def getvalue(self):
        return self.obj.getvalue()
