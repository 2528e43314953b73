class PngSecretException(Exception):
    '''Base class to extend in order to throw exception in pngsecret.

    Other than the message it takes the chain of the layers that
    caused the exception: each structure the exception goes through
    appends the name of the failing field, so the innermost comes first.
    '''

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    @property
    def location(self):
        path = ''
        for component in reversed(self.chain):
            path += component if component.startswith('[') or not path else f'.{component}'

        return path

    def __str__(self):
        if not self.chain:
            return self.message

        return f'{self.message} (at {self.location})'


class FormatError(PngSecretException):
    '''The binary data doesn't follow the format.'''
    pass


class SignatureError(FormatError):
    pass


class TruncatedError(FormatError):
    pass


class CrcMismatchError(FormatError):
    pass


class ValidationError(PngSecretException):
    '''A value provided by the caller is not acceptable.'''
    pass


class EncodingError(PngSecretException):
    pass
