import copy
import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Field related class.

    The field passed at class definition is only a template: each instance
    of the class gets its own copy the first time the attribute is accessed."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self

        data = instance.__dict__

        if self.field.name not in data:
            logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        data = instance.__dict__

        # if the value is the same type then set as it is
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls._meta.fields:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        cls._meta.fields.append(name)
        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, name, bases, attrs):
        '''Fields are removed from the class body and installed as descriptors,
        remembering the order of definition (a little bit like Django does).'''
        fields = [(_k, _v) for _k, _v in attrs.items() if isinstance(_v, FieldBase)]
        new_attrs = {_k: _v for _k, _v in attrs.items() if not isinstance(_v, FieldBase)}

        new_cls = super(MetaChunk, cls).__new__(cls, name, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance: the descriptors are found via the usual MRO
        for parent in [_ for _ in bases if isinstance(_, MetaChunk)]:
            for field_name in parent._meta.fields:
                if field_name not in new_cls._meta.fields:
                    new_cls._meta.fields.append(field_name)

        for field_name, field in fields:
            new_cls.add_to_class(field_name, field)

        return new_cls

    def add_to_class(cls, name, value):
        logger.debug('adding field \'%s\' to \'%s\'' % (name, cls.__name__))
        value.contribute_to_chunk(cls, name)
