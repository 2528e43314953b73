"""
# pngsecret: hide messages inside PNG chunks.

A PNG file is a signature followed by a list of chunks, each one made of
a length, a type, the data and a CRC. The chunks with an ancillary type
can be ignored by the readers, so they are a good place for a message.

The formats are described as classes whose attributes are fields and
two basic operations are defined for them and their sub components:

 1. unpack(): reading the binary data and build a high-level representation
    of that. When unpacking each field knows how many bytes needs to read,
    possibly using the value of another field (see Dependency).

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): recompute offset and size of each sub component, so that
    packing and reporting agree on where the data lives.
"""

__version__ = '0.1.0'
