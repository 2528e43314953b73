'''
We are implementing fields to handle CRC calculation.
'''
import logging
from zlib import crc32

from .. import fields
from ..exceptions import CrcMismatchError


logger = logging.getLogger(__name__)


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The 32-bit CRC register is initialized to all 1's, and then the data from each byte is processed
    from the least significant bit (1) to the most significant bit (128). After all the data bytes are processed,
    the CRC register is inverted (its ones complement is taken). This value is transmitted (stored in the file)
    MSB first.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.

    The fields covered are siblings of this one, indicated by name; the value
    is never trusted when unpacking: it is checked against the computed one.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def __repr__(self):
        return '<%s(0x%08x)>' % (self.__class__.__name__, self.value)

    def calculate(self):
        value = b''
        for field_name in self.fields:
            field = getattr(self.father, field_name)
            value += field.raw

        return crc32(value)

    def update(self):
        self.value = self.calculate()

    def is_valid(self):
        return self.value == self.calculate()

    def unpack(self, stream):
        super().unpack(stream)

        expected = self.calculate()
        if self.value != expected:
            logger.debug(f'crc mismatch: stored 0x{self.value:08x}, computed 0x{expected:08x}')
            raise CrcMismatchError(f'incorrect CRC: expected 0x{expected:08x}, found 0x{self.value:08x}')
