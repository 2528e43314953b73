import pytest

from pngsecret.core import Chunk
from pngsecret.fields import StructField, StringField, ArrayField, Endianess
from pngsecret.properties import Dependency
from pngsecret.exceptions import TruncatedError


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father == dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.pack() == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first, second = Dummy(), Dummy()
    first.a.value = 1

    assert first.a is not second.a
    assert second.a.value == 0


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'), default=b'kebab')

    example = Example()

    assert example.sz.father == example
    assert example.sz.value == 5
    assert example.data.value == b'kebab'

    example.data.value = b'kebab with fries'

    assert example.sz.value == 16
    assert example.size == 4 + 16


def test_unpack_w_dependencies():
    class TLV(Chunk):
        type   = StructField('I', endianess=Endianess.BIG_ENDIAN)
        length = StructField('I', endianess=Endianess.BIG_ENDIAN)
        data   = StringField(Dependency('.length'))
        extra  = StructField('I', endianess=Endianess.BIG_ENDIAN)

    tlv = TLV(b'\x00\x00\x00\x01' + b'\x00\x00\x00\x03' + b'abc' + b'\xca\xfe\xba\xbe')

    assert tlv.type.value == 1
    assert tlv.length.value == 3
    assert tlv.data.value == b'abc'
    assert tlv.extra.value == 0xcafebabe
    assert tlv.layout == {
        'type': (0, 4),
        'length': (4, 4),
        'data': (8, 3),
        'extra': (11, 4),
    }


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert [_ for _, __ in son.get_fields()] == [
        'field_a', 'field_b', 'field_c',
    ]

    assert son.field_b.value == 0x04030201
    assert son.field_c.value == field_c_value


def test_field_from_chunk():
    class Dummy(Chunk):
        field = StructField('i')

    class DummyContainer(Chunk):
        dummy = Dummy()
        other = Dummy()

    container = DummyContainer(b'\x01\x00\x00\x00\x02\x00\x00\x00')

    assert container.dummy.field.value == 1
    assert container.other.field.value == 2
    assert container.other.offset == 4
    assert container.other.root is container


def test_field_duplicated_name():
    class Father(Chunk):
        field = StructField('I')

    with pytest.raises(AttributeError):
        class Son(Father):
            field = StructField('I')


def test_unpack_error_has_the_chain():
    class Element(Chunk):
        length = StructField('B')
        data   = StringField(Dependency('.length'))

    class Container(Chunk):
        count    = StructField('B')
        elements = ArrayField(Element())

    with pytest.raises(TruncatedError) as e:
        Container(b'\x02' + b'\x01a' + b'\x05abc')

    assert e.value.chain == ['data', '[1]', 'elements']
    assert e.value.location == 'elements[1].data'
    assert 'elements[1].data' in str(e.value)
