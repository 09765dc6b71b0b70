""" Thin wrapper around the msgspec JSON encoder and decoder. The rest of
    the package calls :func:`dumps` and :func:`loads` rather than importing
    msgspec directly, so that every byte string put on the wire or written
    to disk goes through the same encoder instance.
"""

import msgspec


# The msgspec 'encode' operation returns bytes. Everything that calls dumps()
# expects bytes back, there is no str variant.

encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

dumps = encoder.encode
loads = decoder.decode

DecodeError = msgspec.DecodeError


def decode(data, type):
    """ Decode the JSON *data* as an instance of *type*; this will raise
        :class:`msgspec.ValidationError` if the structure does not match.
    """

    return msgspec.json.decode(data, type=type)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
