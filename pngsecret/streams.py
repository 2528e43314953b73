import io
import logging

from .exceptions import TruncatedError


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file object to
    uniform its properties: mainly we need a read that fails
    loudly when the data is not there.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to use as a stream' % self._type.__name__)

        init_method()

    def __getattr__(self, name):
        # 'obj' is missing only during construction
        if name == 'obj':
            raise AttributeError(name)

        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return f'<{self.__class__.__name__}({self._type.__name__})>'

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def close(self):
        self.obj.close()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def read_exact(self, n):
        '''Read exactly n bytes or raise TruncatedError.'''
        offset = self.obj.tell()
        data = self.obj.read(n)

        if len(data) != n:
            raise TruncatedError(f'expected {n} bytes at offset {offset}, only {len(data)} available')

        return data

    def at_eof(self):
        self.save()
        is_there_more = len(self.obj.read(1)) != 0
        self.restore()

        return not is_there_more

    def read_all(self):
        return self.obj.read()

    def write(self, data):
        return self.obj.write(data)

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)
